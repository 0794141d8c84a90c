# fhevm_sdk/crypto/encryption.py
"""
FHEVM SDK Crypto: Encrypted Inputs

Builds an encrypted-input payload and maps it onto a contract call.

Flow:
    result = await build_input(instance, contract, user,
                               lambda b: b.add32(42))
    args = map_to_contract_params(result, abi, "increment")
    # args == [hex(handle), hex(input_proof)]

Parameter mapping (declaration order):
    name or internalType contains "proof"  -> input_proof
    otherwise                              -> next unconsumed handle
    handles exhausted, proof unused        -> input_proof

Unknown builder types and unknown ABI types are logged and handled
leniently (``add64`` / hex string) so newer type vocabularies keep
working.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from eth_utils import encode_hex

from ..errors import AbiFunctionNotFoundError, InsufficientHandlesError, MissingInputProofError
from ..utils import maybe_await


logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, str]

# External ABI type -> encrypted-input builder method
BUILDER_METHODS: Dict[str, str] = {
    "externalEbool": "add_bool",
    "externalEuint8": "add8",
    "externalEuint16": "add16",
    "externalEuint32": "add32",
    "externalEuint64": "add64",
    "externalEuint128": "add128",
    "externalEuint256": "add256",
    "externalEaddress": "add_address",
}

DEFAULT_BUILDER_METHOD = "add64"


# =============================================================================
# Encrypt result
# =============================================================================

@dataclass
class EncryptResult:
    """Finalized encrypted input: ordered ciphertext handles plus one proof."""
    handles: List[BytesLike] = field(default_factory=list)
    input_proof: Optional[BytesLike] = None

    @classmethod
    def from_backend(cls, value: Any) -> EncryptResult:
        """Accept a dict or an object, snake_case or camelCase."""
        if isinstance(value, EncryptResult):
            return value
        if isinstance(value, Mapping):
            handles = value.get("handles")
            proof = value.get("input_proof", value.get("inputProof"))
        else:
            handles = getattr(value, "handles", None)
            proof = getattr(value, "input_proof", getattr(value, "inputProof", None))
        return cls(handles=list(handles or []), input_proof=proof)


async def build_input(
    instance: Any,
    contract_address: str,
    user_address: str,
    build_fn: Callable[[Any], Any],
) -> EncryptResult:
    """
    Encrypt values for one (contract, user) pair.

    Args:
        instance: Provisioned crypto instance
        contract_address: Target contract
        user_address: Address the input is bound to
        build_fn: Receives the builder and appends typed values
            (add_bool, add8 ... add256, add_address); may be async

    Returns:
        EncryptResult from the builder's encrypt() step
    """
    builder = instance.create_encrypted_input(contract_address, user_address)
    await maybe_await(build_fn(builder))
    encrypted = await maybe_await(builder.encrypt())
    return EncryptResult.from_backend(encrypted)


def map_external_type_to_builder_method(type_name: str) -> str:
    """Builder method for an external encrypted type; unknown types fall back to add64."""
    method = BUILDER_METHODS.get(type_name)
    if method is None:
        logger.warning(f"Unknown internalType: {type_name}, defaulting to {DEFAULT_BUILDER_METHOD}")
        return DEFAULT_BUILDER_METHOD
    return method


# =============================================================================
# Hex helpers
# =============================================================================

def to_hex(value: BytesLike) -> str:
    """0x-prefixed hex string from bytes or a (possibly unprefixed) hex string."""
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return encode_hex(bytes(value))


def _coerce_bool(raw: BytesLike) -> bool:
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in ("0x", "0x0", "0"):
            return False
        return normalized not in ("", "false")
    return any(raw)


def _coerce_int(raw: BytesLike) -> int:
    digits = to_hex(raw)[2:]
    return int(digits, 16) if digits else 0


# =============================================================================
# ABI mapping
# =============================================================================

def _find_function(abi: Sequence[Mapping[str, Any]], function_name: str) -> Mapping[str, Any]:
    for item in abi:
        if item.get("type") == "function" and item.get("name") == function_name:
            return item
    raise AbiFunctionNotFoundError(function_name)


def _is_proof_parameter(param: Mapping[str, Any]) -> bool:
    name = (param.get("name") or "").lower()
    internal_type = (param.get("internalType") or param.get("internal_type") or "").lower()
    return "proof" in name or "proof" in internal_type


def _coerce(raw: BytesLike, abi_type: Optional[str]) -> Any:
    if not abi_type:
        logger.warning("Unknown ABI param type; passing as hex")
        return to_hex(raw)
    if abi_type == "bool":
        return _coerce_bool(raw)
    if abi_type in ("address", "string"):
        return to_hex(raw)
    if abi_type.startswith("uint") or abi_type.startswith("int"):
        return _coerce_int(raw)
    if abi_type.startswith("bytes"):
        return to_hex(raw)
    logger.warning(f"Unknown ABI param type {abi_type}; passing as hex")
    return to_hex(raw)


def map_to_contract_params(
    encrypt_result: Union[EncryptResult, Mapping[str, Any]],
    abi: Sequence[Mapping[str, Any]],
    function_name: str,
) -> List[Any]:
    """
    Map an encrypted input onto a function's parameters, in order.

    Raises:
        AbiFunctionNotFoundError: If the function is not in the ABI
        MissingInputProofError: If a proof parameter has no proof
        InsufficientHandlesError: If handles and proof are exhausted
    """
    enc = EncryptResult.from_backend(encrypt_result)
    fn = _find_function(abi, function_name)
    inputs = fn.get("inputs") or []

    args: List[Any] = []
    handle_index = 0
    proof_consumed = False

    for index, param in enumerate(inputs):
        label = param.get("name") or f"#{index}"

        if _is_proof_parameter(param):
            if not enc.input_proof:
                raise MissingInputProofError(
                    f"map_to_contract_params: missing input_proof for parameter {label}"
                )
            raw = enc.input_proof
            proof_consumed = True
        elif handle_index < len(enc.handles) and enc.handles[handle_index]:
            raw = enc.handles[handle_index]
            handle_index += 1
        elif not proof_consumed and enc.input_proof:
            raw = enc.input_proof
            proof_consumed = True
        else:
            raise InsufficientHandlesError(
                f"map_to_contract_params: not enough encrypted handles for parameter {label}"
            )

        args.append(_coerce(raw, param.get("type")))

    return args
