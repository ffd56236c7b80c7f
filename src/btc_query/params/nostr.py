"""Nostr identities (NIP-19 ``npub`` and ``nprofile``)."""

from __future__ import annotations

from dataclasses import dataclass

from btc_query.encoding import Bech32Variant, decode_bech32, words_to_bytes
from btc_query.exceptions import InvalidPaymentError
from btc_query.keys import validate_xonly_pubkey
from btc_query.params import PaymentParamsBase

# nprofile TLV type holding the public key
_NPROFILE_SPECIAL = 0


@dataclass(frozen=True)
class NostrPubkey(PaymentParamsBase):
    """A nostr public key. Relay hints of an nprofile are skipped."""

    key: bytes

    def nostr_pubkey(self) -> bytes:
        return self.key


def parse_nostr(text: str) -> NostrPubkey:
    """Decode ``npub1...``/``nprofile1...``, with or without ``nostr:``.

    Raises:
        InvalidPaymentError: If the string is not a valid nostr public key.
    """
    s = text.strip()
    if s.lower().startswith("nostr:"):
        s = s[len("nostr:") :]
    try:
        hrp, words, variant = decode_bech32(s)
        payload = words_to_bytes(words)
    except ValueError as e:
        raise InvalidPaymentError(text, f"bad nostr bech32: {e}") from e
    if variant is not Bech32Variant.BECH32:
        raise InvalidPaymentError(text, "nostr entities use a bech32 checksum")

    if hrp == "npub":
        key = payload
    elif hrp == "nprofile":
        key = _read_nprofile_key(text, payload)
    else:
        raise InvalidPaymentError(text, f"unsupported nostr entity {hrp!r}")

    try:
        validate_xonly_pubkey(key)
    except ValueError as e:
        raise InvalidPaymentError(text, str(e)) from e
    return NostrPubkey(key=key)


def _read_nprofile_key(text: str, payload: bytes) -> bytes:
    key = None
    offset = 0
    while offset + 2 <= len(payload):
        tlv_type, length = payload[offset], payload[offset + 1]
        value = payload[offset + 2 : offset + 2 + length]
        if len(value) != length:
            raise InvalidPaymentError(text, "truncated nprofile")
        offset += 2 + length
        if tlv_type == _NPROFILE_SPECIAL and key is None:
            key = value
    if key is None:
        raise InvalidPaymentError(text, "nprofile without a public key")
    return key
