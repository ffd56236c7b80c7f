"""Shared fixtures: builders for real, correctly checksummed payment strings."""

from __future__ import annotations

import hashlib
import logging

import base58
import bech32
import pytest
from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.util import sigencode_string_canonize

CHARSET = bech32.CHARSET
BECH32M_CONST = 0x2BC830A3

# Private key from the BOLT11 test vectors
INVOICE_KEY = SigningKey.from_string(
    bytes.fromhex("e126f68f7eafcc8b74f54d269fe206be715000f94dac067d1c04a8ca3b2db734"),
    curve=SECP256k1,
)
INVOICE_PAYEE = INVOICE_KEY.get_verifying_key().to_string("compressed").hex()

# x coordinate of the secp256k1 generator: a valid x-only key
NOSTR_KEY = bytes.fromhex(
    "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
)
NODE_KEY = "02" + NOSTR_KEY.hex()

GENESIS_ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"

MAINNET_CHAIN = bytes.fromhex(
    "6fe28c0ab6f1b372c1a6a246ae63f74f931e8365e15a089c68d6190000000000"
)
REGTEST_CHAIN = bytes.fromhex(
    "06226e46111a0b59caaf126043eb5bbf28c34f3a5e332a1fc7b2b73cf188910f"
)


def to_words(data: bytes) -> list[int]:
    return bech32.convertbits(data, 8, 5, True)


def bech32_string(hrp: str, words: list[int], const: int = 1) -> str:
    """bech32 (or bech32m) encoding with no length cap."""
    values = bech32.bech32_hrp_expand(hrp) + words
    polymod = bech32.bech32_polymod(values + [0] * 6) ^ const
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(CHARSET[w] for w in words + checksum)


def _int_words(value: int, count: int) -> list[int]:
    return [(value >> 5 * (count - 1 - i)) & 31 for i in range(count)]


def _tagged(tag: str, words: list[int]) -> list[int]:
    return [CHARSET.index(tag), len(words) >> 5, len(words) & 31] + words


def build_invoice(
    hrp: str = "lnbc10u",
    *,
    description: str | None = "coffee",
    payment_hash: bytes = b"\x01" * 32,
    payment_secret: bytes = b"\x02" * 32,
    payee: bytes | None = None,
    expiry: int | None = None,
    fallback: tuple[int, bytes] | None = None,
    timestamp: int = 1_700_000_000,
    key: SigningKey = INVOICE_KEY,
) -> str:
    """Build and sign a BOLT11 invoice.

    The invoice carries a payment secret, the matching feature bits and a
    low-S signature, as lightning implementations require.
    """
    words = _int_words(timestamp, 7)
    words += _tagged("p", to_words(payment_hash))
    words += _tagged("s", to_words(payment_secret))
    # var_onion_optin (bit 8) and payment_secret (bit 14)
    words += _tagged("9", [16, 8, 0])
    if description is not None:
        words += _tagged("d", to_words(description.encode("utf-8")))
    if payee is not None:
        words += _tagged("n", to_words(payee))
    if expiry is not None:
        words += _tagged("x", _int_words(expiry, 2))
    if fallback is not None:
        version, program = fallback
        words += _tagged("f", [version] + to_words(program))

    signed = hrp.encode("utf-8") + bytes(bech32.convertbits(words, 5, 8, True))
    digest = hashlib.sha256(signed).digest()
    signature = key.sign_digest_deterministic(
        digest, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize
    )
    expected = key.get_verifying_key().to_string("compressed")
    candidates = VerifyingKey.from_public_key_recovery_with_digest(
        signature, digest, SECP256k1, hashfunc=hashlib.sha256
    )
    recovery_id = next(
        i for i, vk in enumerate(candidates) if vk.to_string("compressed") == expected
    )
    words += to_words(signature + bytes([recovery_id]))
    return bech32_string(hrp, words)


def build_offer(records: dict[int, bytes]) -> str:
    """Build a BOLT12 offer from small TLV records (types and lengths < 253)."""
    stream = b"".join(
        bytes([tlv_type, len(value)]) + value for tlv_type, value in sorted(records.items())
    )
    return "lno1" + "".join(CHARSET[w] for w in to_words(stream))


def build_segwit(hrp: str, version: int, program: bytes) -> str:
    const = 1 if version == 0 else BECH32M_CONST
    return bech32_string(hrp, [version] + to_words(program), const)


def build_lnurl(url: str) -> str:
    return bech32_string("lnurl", to_words(url.encode("utf-8"))).upper()


def build_npub(key: bytes) -> str:
    return bech32_string("npub", to_words(key))


def build_base58(version: int, payload: bytes) -> str:
    return base58.b58encode_check(bytes([version]) + payload).decode("ascii")


@pytest.fixture(autouse=True)
def _reset_log_handlers():
    """The CLI points the root logger at the captured stderr of its test."""
    yield
    logging.getLogger().handlers.clear()


@pytest.fixture
def p2wpkh_address() -> str:
    return build_segwit("bc", 0, bytes(range(20)))


@pytest.fixture
def npub() -> str:
    return build_npub(NOSTR_KEY)


@pytest.fixture
def lnurl_string() -> str:
    return build_lnurl("https://service.example.com/lnurl/pay/abc")


@pytest.fixture
def sample_queries(p2wpkh_address, npub, lnurl_string) -> dict[str, str]:
    """One valid query per payment kind."""
    invoice = build_invoice("lnbc10u")
    return {
        "OnChain": p2wpkh_address,
        "UnifiedUri": f"bitcoin:{p2wpkh_address}?amount=0.001&lightning={invoice}",
        "Invoice": invoice,
        "Offer": build_offer({8: (5000).to_bytes(2, "big"), 10: b"tips", 22: bytes.fromhex(NODE_KEY)}),
        "PublicKey": NODE_KEY,
        "LnUrl": lnurl_string,
        "LnAddress": "satoshi@example.com",
        "NostrValue": npub,
    }
