# tests/conftest.py
"""
FHEVM SDK: Test Fakes

In-process stand-ins for everything the SDK talks to:
    FakeInstance / FakeBuilder  - crypto instance and encrypted-input builder
    FakeRelayerClient           - RelayerClientAdapter recording its calls
    FakeRpcNetwork              - RpcSession factory over canned responses
    MockEthereumProvider        - EIP-1193 provider
    FakeScriptHost              - page access for the browser adapter
"""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from fhevm_sdk import create_fhevm_config
from fhevm_sdk.adapters.relayer import RelayerClientAdapter, ScriptHost
from fhevm_sdk.adapters.storage import MemoryPublicKeyStore
from fhevm_sdk.transport import EthereumProvider, RpcSession


ACL = "0x" + "A" * 40
KMS = "0x" + "b" * 40
INPUT_VERIFIER = "0x" + "c" * 40
SEPOLIA_ID = 11155111
HARDHAT_URL = "http://localhost:8545"

SEPOLIA_CHAIN = {
    "id": SEPOLIA_ID,
    "name": "Sepolia",
    "rpcUrl": "https://sepolia.example",
    "relayer": {"acl": ACL, "kms": KMS, "inputVerifier": INPUT_VERIFIER},
}

MOCK_METADATA = {
    "ACLAddress": "0x" + "1" * 40,
    "InputVerifierAddress": "0x" + "2" * 40,
    "KMSVerifierAddress": "0x" + "3" * 40,
}

HARDHAT_VERSION = "HardhatNetwork/2.22.0/@fhevm/hardhat-plugin"


# =============================================================================
# Crypto instance
# =============================================================================

class FakeBuilder:
    """Encrypted-input builder; one 32-byte handle per appended value."""

    def __init__(self, contract_address: str, user_address: str):
        self.contract_address = contract_address
        self.user_address = user_address
        self.values: List[tuple] = []

    def _add(self, method: str, value: Any) -> FakeBuilder:
        self.values.append((method, value))
        return self

    def add_bool(self, value):
        return self._add("add_bool", value)

    def add8(self, value):
        return self._add("add8", value)

    def add16(self, value):
        return self._add("add16", value)

    def add32(self, value):
        return self._add("add32", value)

    def add64(self, value):
        return self._add("add64", value)

    def add128(self, value):
        return self._add("add128", value)

    def add256(self, value):
        return self._add("add256", value)

    def add_address(self, value):
        return self._add("add_address", value)

    async def encrypt(self) -> Dict[str, Any]:
        handles = [bytes([i + 1]) * 32 for i in range(len(self.values))]
        return {"handles": handles, "input_proof": b"\xaa\xbb"}


class FakeInstance:
    """Crypto instance with deterministic outputs and call counters."""

    def __init__(self, label: str = "instance"):
        self.label = label
        self.builders: List[FakeBuilder] = []
        self.public_key_calls = 0
        self.public_params_calls = 0
        self.keypair_calls = 0
        self.user_decrypt_calls: List[Dict[str, Any]] = []

    def create_encrypted_input(self, contract_address: str, user_address: str) -> FakeBuilder:
        builder = FakeBuilder(contract_address, user_address)
        self.builders.append(builder)
        return builder

    async def get_public_key(self):
        self.public_key_calls += 1
        return {"public_key_id": "pk-1", "public_key": b"\x01\x02"}

    async def get_public_params(self, bits: int):
        self.public_params_calls += 1
        return {"public_params_id": f"pp-{bits}", "public_params": b"\x03\x04"}

    def generate_keypair(self) -> Dict[str, str]:
        self.keypair_calls += 1
        return {
            "public_key": "0x" + f"{self.keypair_calls:02x}" * 32,
            "private_key": "0x" + "ee" * 32,
        }

    def create_eip712(self, public_key, contract_addresses, start_timestamp, duration_days):
        return {
            "domain": {
                "name": "Decryption",
                "version": "1",
                "chainId": SEPOLIA_ID,
                "verifyingContract": "0x" + "d" * 40,
            },
            "types": {
                "EIP712Domain": [
                    {"name": "name", "type": "string"},
                    {"name": "version", "type": "string"},
                    {"name": "chainId", "type": "uint256"},
                    {"name": "verifyingContract", "type": "address"},
                ],
                "UserDecryptRequestVerification": [
                    {"name": "publicKey", "type": "bytes"},
                    {"name": "contractAddresses", "type": "address[]"},
                    {"name": "startTimestamp", "type": "uint256"},
                    {"name": "durationDays", "type": "uint256"},
                ],
            },
            "message": {
                "publicKey": public_key,
                "contractAddresses": [a.lower() for a in contract_addresses],
                "startTimestamp": start_timestamp,
                "durationDays": duration_days,
            },
        }

    async def user_decrypt(self, requests, private_key, public_key, signature,
                           contract_addresses, user_address, start_timestamp, duration_days):
        self.user_decrypt_calls.append({
            "requests": requests,
            "signature": signature,
            "contract_addresses": contract_addresses,
            "user_address": user_address,
        })
        return {r["handle"]: 42 for r in requests}


class PublicDecryptInstance(FakeInstance):
    """Instance exposing the public_decrypt capability."""

    def __init__(self, fail_with: Optional[Exception] = None):
        super().__init__()
        self.fail_with = fail_with
        self.public_decrypt_calls: List[Any] = []

    async def public_decrypt(self, requests):
        self.public_decrypt_calls.append(requests)
        if self.fail_with is not None:
            raise self.fail_with
        return {r["handle"]: 7 for r in requests}


# =============================================================================
# Relayer
# =============================================================================

class FakeRelayerClient(RelayerClientAdapter):
    """Records load/init/create_instance calls."""

    def __init__(self, baseline: Optional[Dict[str, Any]] = None, init_result: bool = True,
                 instance_factory=FakeInstance):
        self.baseline = baseline
        self.init_result = init_result
        self.instance_factory = instance_factory
        self.load_calls = 0
        self.init_calls = 0
        self.created: List[Dict[str, Any]] = []
        self.instances: List[Any] = []

    async def load(self) -> None:
        self.load_calls += 1

    async def init(self, options=None) -> bool:
        self.init_calls += 1
        return self.init_result

    async def create_instance(self, config):
        self.created.append(config)
        instance = self.instance_factory()
        self.instances.append(instance)
        return instance

    def get_baseline_config(self):
        return dict(self.baseline) if self.baseline is not None else None


def make_backend(**overrides) -> SimpleNamespace:
    """Importable-backend stand-in for ProcessRelayerClient."""
    created: List[Dict[str, Any]] = []

    def create_instance(config):
        created.append(config)
        return FakeInstance("process")

    backend = SimpleNamespace(
        SEPOLIA_CONFIG={
            "acl_contract_address": ACL,
            "kms_contract_address": KMS,
            "input_verifier_contract_address": INPUT_VERIFIER,
            "gateway_chain_id": 55815,
        },
        create_instance=create_instance,
        created=created,
    )
    for key, value in overrides.items():
        setattr(backend, key, value)
    return backend


# =============================================================================
# JSON-RPC
# =============================================================================

class FakeRpcSession(RpcSession):
    def __init__(self, network: FakeRpcNetwork, url: str):
        super().__init__(url)
        self._network = network
        self.closed = False

    async def chain_id(self) -> int:
        value = self._network.chain_ids.get(self.url)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise ConnectionError(f"connection refused: {self.url}")
        return value

    async def send(self, method, params=None):
        self._network.calls.append((self.url, method))
        value = self._network.responses.get((self.url, method))
        if isinstance(value, Exception):
            raise value
        return value

    async def close(self) -> None:
        self.closed = True


class FakeRpcNetwork:
    """Callable RpcSession factory backed by canned responses."""

    def __init__(self, chain_ids=None, responses=None):
        self.chain_ids: Dict[str, Any] = dict(chain_ids or {})
        self.responses: Dict[tuple, Any] = dict(responses or {})
        self.sessions: List[FakeRpcSession] = []
        self.calls: List[tuple] = []

    def __call__(self, url: str) -> FakeRpcSession:
        session = FakeRpcSession(self, url)
        self.sessions.append(session)
        return session

    @classmethod
    def hardhat(cls, url: str = HARDHAT_URL, version: Any = HARDHAT_VERSION,
                metadata: Any = None) -> FakeRpcNetwork:
        return cls(
            chain_ids={url: 31337},
            responses={
                (url, "web3_clientVersion"): version,
                (url, "fhevm_relayer_metadata"): MOCK_METADATA if metadata is None else metadata,
            },
        )


class MockEthereumProvider(EthereumProvider):
    """EIP-1193 provider with fixed chain and accounts."""

    def __init__(self, chain_id: int = SEPOLIA_ID, accounts: Optional[List[str]] = None,
                 signature: str = "0x" + "5" * 130):
        self.chain_id = chain_id
        self.accounts = accounts if accounts is not None else ["0x" + "1" * 40]
        self.signature = signature
        self.requests: List[tuple] = []

    async def request(self, method, params=None):
        self.requests.append((method, params))
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method in ("eth_accounts", "eth_requestAccounts"):
            return self.accounts
        if method == "eth_signTypedData_v4":
            return self.signature
        raise ValueError(f"unsupported method {method}")


# =============================================================================
# Browser page
# =============================================================================

class FakeScriptHost(ScriptHost):
    """Page whose injected script populates ``sdk`` under a global name."""

    def __init__(self, sdk: Any = None, global_name: str = "relayerSDK",
                 fail_with: Optional[Exception] = None):
        self.sdk = sdk
        self.global_name = global_name
        self.fail_with = fail_with
        self.scripts: List[str] = []
        self.globals: Dict[str, Any] = {}

    def has_script(self, src: str) -> bool:
        return src in self.scripts

    async def inject_script(self, src: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.scripts.append(src)
        if self.sdk is not None:
            self.globals[self.global_name] = self.sdk

    def get_global(self, name: str):
        return self.globals.get(name)


class FakeSdk:
    """Global object published by the relayer SDK script."""

    def __init__(self, init_result: bool = True):
        self.init_result = init_result
        self.SepoliaConfig = {"acl_contract_address": ACL}
        self.init_options: List[Any] = []
        self.created: List[Any] = []

    async def initSDK(self, options=None):
        self.init_options.append(options)
        return self.init_result

    async def createInstance(self, config):
        self.created.append(config)
        return FakeInstance("browser")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def relayer() -> FakeRelayerClient:
    return FakeRelayerClient()


@pytest.fixture
def store() -> MemoryPublicKeyStore:
    return MemoryPublicKeyStore()


@pytest.fixture
def make_config(relayer, store):
    """Config factory; keyword arguments override create_fhevm_config options."""
    def factory(**options):
        options.setdefault("chains", [SEPOLIA_CHAIN])
        options.setdefault("relayer_client", relayer)
        options.setdefault("public_key_store", store)
        options.setdefault("logger", logging.getLogger("fhevm_sdk"))
        return create_fhevm_config(**options)
    return factory
