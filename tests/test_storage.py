# tests/test_storage.py
"""Public-key cache backends and signature storage."""

import asyncio
import json

import pytest

from fhevm_sdk.adapters.storage import (
    FilePublicKeyStore,
    InMemoryStringStorage,
    MemoryPublicKeyStore,
    PublicKeyData,
    PublicKeyRecord,
    PublicParamsEntry,
    SqlitePublicKeyStore,
)

from conftest import ACL


def complete_record() -> PublicKeyRecord:
    return PublicKeyRecord(
        public_key=PublicKeyData(id="pk-1", data=b"\x01\x02"),
        public_params={"2048": PublicParamsEntry(public_params_id="pp-1", public_params=b"\x03\x04")},
    )


def test_record_completeness():
    assert complete_record().is_complete
    assert not PublicKeyRecord(public_key=PublicKeyData(id="pk", data=b"\x01")).is_complete
    assert not PublicKeyRecord(public_params={"2048": PublicParamsEntry("pp", b"\x02")}).is_complete
    assert not PublicKeyRecord().is_complete


def test_record_wire_shape():
    data = complete_record().to_dict()

    assert data == {
        "publicKey": {"id": "pk-1", "data": "0x0102"},
        "publicParams": {"2048": {"publicParamsId": "pp-1", "publicParams": "0x0304"}},
    }
    assert PublicKeyRecord.from_dict(json.loads(json.dumps(data))) == complete_record()


def test_record_instance_hints():
    public_key, public_params = complete_record().to_instance_hints()

    assert public_key == {"id": "pk-1", "data": b"\x01\x02"}
    assert public_params == {"2048": {"public_params_id": "pp-1", "public_params": b"\x03\x04"}}
    assert PublicKeyRecord().to_instance_hints() == (None, None)


@pytest.mark.parametrize("make_store", [
    lambda tmp_path: MemoryPublicKeyStore(),
    lambda tmp_path: FilePublicKeyStore(tmp_path / "keys"),
    lambda tmp_path: SqlitePublicKeyStore(),
], ids=["memory", "file", "sqlite"])
def test_store_contract(tmp_path, make_store):
    async def scenario():
        store = make_store(tmp_path)

        assert await store.get(ACL) is None

        await store.set(ACL, complete_record())
        assert await store.get(ACL) == complete_record()
        # keys are case-insensitive
        assert await store.get(ACL.lower()) == complete_record()

        await store.delete(ACL)
        assert await store.get(ACL) is None
        await store.delete(ACL)

    asyncio.run(scenario())


def test_file_store_layout(tmp_path):
    async def scenario():
        store = FilePublicKeyStore(tmp_path / "cache")
        assert not store.directory.exists()

        await store.set(ACL, complete_record())
        path = tmp_path / "cache" / f"{ACL.lower()}.json"
        assert path.exists()
        assert json.loads(path.read_text())["publicKey"]["data"] == "0x0102"

    asyncio.run(scenario())


def test_file_store_propagates_corrupt_file(tmp_path):
    async def scenario():
        store = FilePublicKeyStore(tmp_path)
        (tmp_path / f"{ACL.lower()}.json").write_text("{not json")
        with pytest.raises(ValueError):
            await store.get(ACL)

    asyncio.run(scenario())


def test_sqlite_store_keeps_single_params_entry(tmp_path):
    async def scenario():
        store = SqlitePublicKeyStore(tmp_path / "db" / "keys.db")
        record = PublicKeyRecord(
            public_key=PublicKeyData(id=None, data=None),
            public_params={
                "1024": PublicParamsEntry("pp-1024", b"\x05"),
                "2048": PublicParamsEntry("pp-2048", b"\x06"),
            },
        )
        await store.set(ACL, record)
        loaded = await store.get(ACL)
        store.close()
        return loaded

    loaded = asyncio.run(scenario())
    assert loaded.public_key is None
    assert loaded.public_params == {"2048": PublicParamsEntry("pp-2048", b"\x06")}
    assert not loaded.is_complete


def test_sqlite_store_persists_across_connections(tmp_path):
    path = tmp_path / "keys.db"

    async def write():
        store = SqlitePublicKeyStore(path)
        await store.set(ACL, complete_record())
        store.close()

    async def read():
        store = SqlitePublicKeyStore(path)
        try:
            return await store.get(ACL)
        finally:
            store.close()

    asyncio.run(write())
    assert asyncio.run(read()) == complete_record()


def test_in_memory_string_storage():
    async def scenario():
        storage = InMemoryStringStorage()
        assert await storage.get_item("k") is None
        await storage.set_item("k", "v")
        assert await storage.get_item("k") == "v"
        await storage.remove_item("k")
        await storage.remove_item("k")
        return len(storage)

    assert asyncio.run(scenario()) == 0
