"""Bech32 helpers shared by the payment parsers.

The ``bech32`` package implements BIP-173 with the 90 character cap that
applies to segwit addresses. BOLT11 invoices, BOLT12 offers and LNURLs are
routinely longer than that, and offers carry no checksum at all, so the
framing is done here on top of the package's checksum primitives.
"""

from __future__ import annotations

from enum import Enum

import bech32

CHARSET = bech32.CHARSET


class Bech32Variant(Enum):
    """Checksum constant: BIP-173 bech32 or BIP-350 bech32m."""

    BECH32 = 1
    BECH32M = 0x2BC830A3


def decode_bech32(
    text: str, *, checksum: bool = True
) -> tuple[str, list[int], Bech32Variant | None]:
    """Split a bech32 string into its HRP and 5-bit data words.

    Args:
        text: The bech32 string. Must be all lowercase or all uppercase.
        checksum: Whether the last six words are a checksum to verify and
            strip. BOLT12 strings set this to False.

    Returns:
        (hrp, words, variant). ``variant`` is None when checksum is False.

    Raises:
        ValueError: On mixed case, bad characters or a checksum mismatch.
    """
    if text.lower() != text and text.upper() != text:
        raise ValueError("mixed case")
    if any(ord(c) < 33 or ord(c) > 126 for c in text):
        raise ValueError("invalid character")

    text = text.lower()
    pos = text.rfind("1")
    if pos < 1:
        raise ValueError("missing separator")

    hrp, payload = text[:pos], text[pos + 1 :]
    if any(c not in CHARSET for c in payload):
        raise ValueError("invalid data character")
    words = [CHARSET.find(c) for c in payload]

    if not checksum:
        return hrp, words, None

    if len(words) < 6:
        raise ValueError("data too short for checksum")
    polymod = bech32.bech32_polymod(bech32.bech32_hrp_expand(hrp) + words)
    for variant in Bech32Variant:
        if polymod == variant.value:
            return hrp, words[:-6], variant
    raise ValueError("invalid checksum")


def encode_bech32(
    hrp: str, words: list[int], variant: Bech32Variant = Bech32Variant.BECH32
) -> str:
    """Encode 5-bit words under ``hrp`` with a bech32 or bech32m checksum."""
    values = bech32.bech32_hrp_expand(hrp) + list(words)
    polymod = bech32.bech32_polymod(values + [0] * 6) ^ variant.value
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(CHARSET[w] for w in list(words) + checksum)


def words_to_bytes(words: list[int]) -> bytes:
    """Regroup 5-bit words into bytes, dropping the trailing padding bits."""
    converted = bech32.convertbits(words, 5, 8, True)
    if converted is None:
        raise ValueError("invalid 5-bit data")
    return bytes(converted[: len(words) * 5 // 8])


def words_to_bytes_padded(words: list[int]) -> bytes:
    """Regroup 5-bit words into bytes, zero-padding the last byte."""
    converted = bech32.convertbits(words, 5, 8, True)
    if converted is None:
        raise ValueError("invalid 5-bit data")
    return bytes(converted)


def bytes_to_words(data: bytes) -> list[int]:
    """Regroup bytes into 5-bit words, zero-padding the last one."""
    return bech32.convertbits(data, 8, 5, True)


def encode_segwit_address(hrp: str, version: int, program: bytes) -> str:
    """Encode a witness program as a segwit address (bech32m for v1+)."""
    variant = Bech32Variant.BECH32 if version == 0 else Bech32Variant.BECH32M
    return encode_bech32(hrp, [version] + bytes_to_words(program), variant)


def encode_npub(key: bytes) -> str:
    """NIP-19 encoding of a 32-byte x-only public key.

    Raises:
        ValueError: If the key is not 32 bytes.
    """
    if len(key) != 32:
        raise ValueError(f"expected a 32 byte key, got {len(key)} bytes")
    return encode_bech32("npub", bytes_to_words(key))


def encode_lnurl(url: str) -> str:
    """LUD-01 bech32 encoding of an LNURL service URL (uppercase)."""
    return encode_bech32("lnurl", bytes_to_words(url.encode("utf-8"))).upper()
