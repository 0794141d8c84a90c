# fhevm_sdk/crypto/__init__.py
"""
FHEVM SDK Crypto Helpers

Operate on a provisioned instance; the FHE math itself lives in the
relayer backend.

    encryption  - build_input, map_to_contract_params
    decryption  - user_decrypt, public_decrypt
    signature   - DecryptionSignature and signers
"""

from .encryption import (
    EncryptResult,
    build_input,
    map_external_type_to_builder_method,
    map_to_contract_params,
    to_hex,
)
from .decryption import (
    DecryptRequest,
    UserDecryptResult,
    PublicDecryptResult,
    user_decrypt,
    public_decrypt,
)
from .signature import (
    DecryptionSigner,
    AccountSigner,
    ProviderSigner,
    DecryptionSignature,
    signature_storage_key,
)

__all__ = [
    "EncryptResult",
    "build_input",
    "map_external_type_to_builder_method",
    "map_to_contract_params",
    "to_hex",
    "DecryptRequest",
    "UserDecryptResult",
    "PublicDecryptResult",
    "user_decrypt",
    "public_decrypt",
    "DecryptionSigner",
    "AccountSigner",
    "ProviderSigner",
    "DecryptionSignature",
    "signature_storage_key",
]
