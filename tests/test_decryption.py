# tests/test_decryption.py
"""user_decrypt / public_decrypt."""

import asyncio

import pytest

from fhevm_sdk import (
    CapabilityMissingError,
    DecryptRequest,
    EmptyRequestListError,
    InMemoryStringStorage,
    ProviderSigner,
    PublicDecryptFailedError,
    PublicDecryptResult,
    SignatureUnavailableError,
    public_decrypt,
    user_decrypt,
)

from conftest import FakeInstance, MockEthereumProvider, PublicDecryptInstance


CONTRACT_A = "0x" + "a" * 40
CONTRACT_B = "0x" + "b" * 40


class RejectingSigner(ProviderSigner):
    async def sign_typed_data(self, typed_data):
        raise PermissionError("User rejected request")


class NoAccountsProvider(MockEthereumProvider):
    async def request(self, method, params=None):
        if method in ("eth_accounts", "eth_requestAccounts"):
            raise PermissionError("User rejected request")
        return await super().request(method, params)


def test_user_decrypt_signs_unique_address_set():
    instance = FakeInstance()
    provider = MockEthereumProvider()
    requests = [
        {"handle": "0x01", "contractAddress": CONTRACT_B},
        DecryptRequest(handle="0x02", contract_address=CONTRACT_A),
        {"handle": "0x01", "contract_address": CONTRACT_B},
    ]

    result = asyncio.run(user_decrypt(
        instance, ProviderSigner(provider), requests, InMemoryStringStorage(),
    ))

    assert result.signature.contract_addresses == [CONTRACT_B, CONTRACT_A]
    assert len(instance.user_decrypt_calls) == 1
    call = instance.user_decrypt_calls[0]
    assert [r["handle"] for r in call["requests"]] == ["0x01", "0x02", "0x01"]
    assert call["signature"] == provider.signature
    assert call["contract_addresses"] == [CONTRACT_B, CONTRACT_A]
    assert result.result == {"0x01": 42, "0x02": 42}


def test_user_decrypt_reuses_cached_signature():
    instance = FakeInstance()
    provider = MockEthereumProvider()
    storage = InMemoryStringStorage()
    signer = ProviderSigner(provider)

    async def scenario():
        first = await user_decrypt(instance, signer, [{"handle": "0x01", "contractAddress": CONTRACT_A}], storage)
        second = await user_decrypt(instance, signer, [{"handle": "0x02", "contractAddress": CONTRACT_A}], storage)
        return first, second

    first, second = asyncio.run(scenario())

    sign_requests = [r for r in provider.requests if r[0] == "eth_signTypedData_v4"]
    assert len(sign_requests) == 1
    assert instance.keypair_calls == 1
    assert second.signature == first.signature
    assert len(storage) == 1


def test_user_decrypt_without_signature():
    instance = FakeInstance()

    with pytest.raises(SignatureUnavailableError) as exc_info:
        asyncio.run(user_decrypt(
            instance,
            RejectingSigner(MockEthereumProvider()),
            [{"handle": "0x01", "contractAddress": CONTRACT_A}],
            InMemoryStringStorage(),
        ))

    assert str(exc_info.value) == "Failed to create FHE decryption signature"
    assert instance.user_decrypt_calls == []


def test_user_decrypt_when_signer_address_is_unavailable():
    for provider in (NoAccountsProvider(), MockEthereumProvider(accounts=[])):
        instance = FakeInstance()
        storage = InMemoryStringStorage()

        with pytest.raises(SignatureUnavailableError):
            asyncio.run(user_decrypt(
                instance,
                ProviderSigner(provider),
                [{"handle": "0x01", "contractAddress": CONTRACT_A}],
                storage,
            ))

        assert instance.user_decrypt_calls == []
        assert instance.keypair_calls == 0
        assert len(storage) == 0


def test_public_decrypt_empty_requests_never_touch_instance():
    class Untouchable:
        def __getattr__(self, name):
            raise AssertionError(f"instance accessed: {name}")

    with pytest.raises(EmptyRequestListError) as exc_info:
        asyncio.run(public_decrypt(Untouchable(), []))
    assert exc_info.value.code == "EMPTY_REQUEST_LIST"


def test_public_decrypt_capability_missing():
    with pytest.raises(CapabilityMissingError) as exc_info:
        asyncio.run(public_decrypt(FakeInstance(), [{"handle": "0x01", "contractAddress": CONTRACT_A}]))
    assert exc_info.value.code == "CAPABILITY_MISSING"


def test_public_decrypt():
    instance = PublicDecryptInstance()

    result = asyncio.run(public_decrypt(instance, [DecryptRequest("0x01", CONTRACT_A)]))

    assert result == PublicDecryptResult(result={"0x01": 7})
    assert instance.public_decrypt_calls == [[{"handle": "0x01", "contract_address": CONTRACT_A}]]


def test_public_decrypt_wraps_backend_failure():
    instance = PublicDecryptInstance(fail_with=RuntimeError("gateway timeout"))

    with pytest.raises(PublicDecryptFailedError, match="public_decrypt failed: gateway timeout") as exc_info:
        asyncio.run(public_decrypt(instance, [DecryptRequest("0x01", CONTRACT_A)]))
    assert isinstance(exc_info.value.__cause__, RuntimeError)
