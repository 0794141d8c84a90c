# tests/test_signature.py
"""Decryption signatures: storage keys, validity, signers."""

import asyncio
import json

from eth_account import Account
from eth_account.messages import encode_typed_data

from fhevm_sdk import (
    AccountSigner,
    DecryptionSignature,
    InMemoryStringStorage,
    ProviderSigner,
)
from fhevm_sdk.crypto.signature import SECONDS_PER_DAY, signature_storage_key

from conftest import FakeInstance, MockEthereumProvider


CONTRACTS = ["0x" + "A" * 40, "0x" + "b" * 40]
USER = "0x" + "1" * 40
NOW = 1_700_000_000


def test_storage_key_ignores_order_and_case():
    key = signature_storage_key(USER, CONTRACTS)

    assert key == signature_storage_key(USER.upper().replace("0X", "0x"), list(reversed(CONTRACTS)))
    assert key == signature_storage_key(USER, [c.lower() for c in CONTRACTS])
    assert key != signature_storage_key(USER, CONTRACTS[:1])
    assert key != signature_storage_key(USER, CONTRACTS, public_key="0x1234")
    assert key.startswith(USER.lower() + ":0x")


def test_validity_window():
    sig = DecryptionSignature(
        private_key="0x01", public_key="0x02", signature="0x03",
        contract_addresses=CONTRACTS, user_address=USER,
        start_timestamp=NOW, duration_days=2,
    )

    assert sig.expires_at == NOW + 2 * SECONDS_PER_DAY
    assert sig.is_valid(NOW + 1)
    assert not sig.is_valid(NOW + 2 * SECONDS_PER_DAY)
    assert DecryptionSignature.from_json(sig.to_json()) == sig


def test_expired_signature_is_replaced():
    instance = FakeInstance()
    provider = MockEthereumProvider()
    storage = InMemoryStringStorage()
    signer = ProviderSigner(provider)

    async def scenario():
        first = await DecryptionSignature.load_or_sign(
            instance, CONTRACTS, signer, storage, duration_days=1, now=NOW,
        )
        second = await DecryptionSignature.load_or_sign(
            instance, CONTRACTS, signer, storage, duration_days=1, now=NOW + SECONDS_PER_DAY + 1,
        )
        return first, second

    first, second = asyncio.run(scenario())

    assert first.start_timestamp == NOW
    assert second.start_timestamp == NOW + SECONDS_PER_DAY + 1
    assert instance.keypair_calls == 2


def test_caller_key_pair_is_used_and_scoped():
    instance = FakeInstance()
    storage = InMemoryStringStorage()
    key_pair = {"public_key": "0x" + "77" * 32, "private_key": "0x" + "66" * 32}

    sig = asyncio.run(DecryptionSignature.load_or_sign(
        instance, CONTRACTS, ProviderSigner(MockEthereumProvider()), storage, key_pair=key_pair,
    ))

    assert sig.public_key == key_pair["public_key"]
    assert sig.private_key == key_pair["private_key"]
    assert instance.keypair_calls == 0
    key = signature_storage_key(USER, CONTRACTS, public_key=key_pair["public_key"])
    assert json.loads(storage._items[key])["public_key"] == key_pair["public_key"]


def test_unreadable_cached_signature_is_discarded(caplog):
    storage = InMemoryStringStorage()
    key = signature_storage_key(USER, CONTRACTS)

    async def scenario():
        await storage.set_item(key, "{broken")
        return await DecryptionSignature.load_or_sign(
            FakeInstance(), CONTRACTS, ProviderSigner(MockEthereumProvider()), storage,
        )

    sig = asyncio.run(scenario())

    assert sig is not None
    assert "Discarding unreadable decryption signature" in caplog.text
    assert DecryptionSignature.from_json(asyncio.run(storage.get_item(key))) == sig


def test_provider_signer_sends_typed_data_v4():
    provider = MockEthereumProvider()
    signer = ProviderSigner(provider)
    typed_data = FakeInstance().create_eip712("0x" + "01" * 32, CONTRACTS, NOW, 1)

    signature = asyncio.run(signer.sign_typed_data(typed_data))

    method, params = provider.requests[-1]
    assert signature == provider.signature
    assert method == "eth_signTypedData_v4"
    assert params[0] == USER
    payload = json.loads(params[1])
    assert payload["primaryType"] == "UserDecryptRequestVerification"
    assert payload["message"]["durationDays"] == 1


def test_account_signer_produces_recoverable_signature():
    account = Account.create()
    signer = AccountSigner(account)
    typed_data = FakeInstance().create_eip712("0x" + "01" * 32, CONTRACTS, NOW, 1)

    signature = asyncio.run(signer.sign_typed_data(typed_data))

    types = {k: v for k, v in typed_data["types"].items() if k != "EIP712Domain"}
    message = encode_typed_data(typed_data["domain"], types, typed_data["message"])
    assert asyncio.run(signer.get_address()) == account.address
    assert Account.recover_message(message, signature=signature) == account.address
