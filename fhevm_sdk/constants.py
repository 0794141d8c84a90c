# fhevm_sdk/constants.py
"""
FHEVM SDK: Constants

Defaults that can be overridden through the environment:
    FHEVM_RELAYER_SDK_URL   relayer SDK bundle loaded by the browser adapter
    FHEVM_HARDHAT_RPC_URL   RPC endpoint of the default local mock chain
"""

from __future__ import annotations

import os
from enum import Enum


# =============================================================================
# Relayer SDK
# =============================================================================

SDK_CDN_URL = os.getenv(
    "FHEVM_RELAYER_SDK_URL",
    "https://cdn.zama.ai/relayer-sdk-js/0.2.0/relayer-sdk-js.umd.cjs",
)

# Global object populated by the relayer SDK script
SDK_GLOBAL_NAME = "relayerSDK"


# =============================================================================
# Local mock chain
# =============================================================================

HARDHAT_CHAIN_ID = 31337
HARDHAT_RPC_URL = os.getenv("FHEVM_HARDHAT_RPC_URL", "http://localhost:8545")

# Seed entry of the mock-chain table; caller entries win on conflict
DEFAULT_MOCK_CHAINS = {HARDHAT_CHAIN_ID: HARDHAT_RPC_URL}

# Substring required in web3_clientVersion of a compatible mock node
MOCK_CLIENT_VERSION_MARKER = "hardhat"


# =============================================================================
# JSON-RPC methods
# =============================================================================

ETH_CHAIN_ID = "eth_chainId"
ETH_ACCOUNTS = "eth_accounts"
ETH_REQUEST_ACCOUNTS = "eth_requestAccounts"
ETH_SIGN_TYPED_DATA = "eth_signTypedData_v4"
WEB3_CLIENT_VERSION = "web3_clientVersion"
FHEVM_RELAYER_METADATA = "fhevm_relayer_metadata"


# =============================================================================
# Key material
# =============================================================================

# Public params size class fetched after instance creation
PUBLIC_PARAMS_BITS = 2048


# =============================================================================
# Statuses
# =============================================================================

class ProvisionStatus(str, Enum):
    """Progress notifications emitted by the provisioning pipeline."""
    SDK_LOADING = "sdk-loading"
    SDK_LOADED = "sdk-loaded"
    SDK_INITIALIZING = "sdk-initializing"
    SDK_INITIALIZED = "sdk-initialized"
    CREATING = "creating"


class InstanceStatus(str, Enum):
    """Externally observable state of an instance handle."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
