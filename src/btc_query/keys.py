"""secp256k1 public key checks and signature key recovery."""

from __future__ import annotations

import hashlib

from ecdsa import SECP256k1, VerifyingKey
from ecdsa.errors import MalformedPointError
from ecdsa.numbertheory import Error as NumberTheoryError
from ecdsa.util import sigdecode_string


def _load_point(data: bytes) -> VerifyingKey:
    try:
        return VerifyingKey.from_string(data, curve=SECP256k1)
    except (MalformedPointError, NumberTheoryError, ValueError) as e:
        raise ValueError(f"not a point on secp256k1: {e}") from e


def validate_compressed_pubkey(data: bytes) -> None:
    """Raise ValueError unless ``data`` is a 33-byte compressed public key."""
    if len(data) != 33 or data[0] not in (2, 3):
        raise ValueError("expected a 33 byte compressed public key")
    _load_point(data)


def validate_xonly_pubkey(data: bytes) -> None:
    """Raise ValueError unless ``data`` is a 32-byte BIP-340 x-only key."""
    if len(data) != 32:
        raise ValueError("expected a 32 byte x-only public key")
    _load_point(b"\x02" + data)


def recover_pubkey(signature: bytes, recovery_id: int, digest: bytes) -> bytes:
    """Recover the compressed public key that produced a compact signature.

    Args:
        signature: 64-byte r || s.
        recovery_id: 0-3; only the parity bit selects between candidates,
            since r >= n never occurs in practice.
        digest: The 32-byte message hash that was signed.

    Returns:
        The signer's 33-byte compressed public key.

    Raises:
        ValueError: If no key can be recovered.
    """
    if len(signature) != 64 or not 0 <= recovery_id <= 3:
        raise ValueError("malformed recoverable signature")
    try:
        candidates = VerifyingKey.from_public_key_recovery_with_digest(
            signature,
            digest,
            SECP256k1,
            hashfunc=hashlib.sha256,
            sigdecode=sigdecode_string,
        )
    except (MalformedPointError, NumberTheoryError, ValueError, RuntimeError) as e:
        raise ValueError(f"signature recovery failed: {e}") from e
    if len(candidates) <= recovery_id & 1:
        raise ValueError("signature recovery failed")
    return candidates[recovery_id & 1].to_string("compressed")
