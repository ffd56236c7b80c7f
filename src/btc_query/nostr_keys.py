"""Hex and NIP-19 renderings of an embedded nostr identity key."""

from __future__ import annotations

from dataclasses import dataclass

from btc_query.encoding import encode_npub
from btc_query.exceptions import EncodingFailureError
from btc_query.params import PaymentParams


@dataclass(frozen=True)
class NostrEncoding:
    hex: str
    bech32: str

    def as_dict(self) -> dict[str, str]:
        return {"hex": self.hex, "bech32": self.bech32}


def encode_nostr(params: PaymentParams) -> NostrEncoding | None:
    """Render the nostr key carried by ``params``, if any.

    Returns:
        The encoding, or None when the payment carries no nostr key.

    Raises:
        EncodingFailureError: If the key cannot be bech32 encoded.
    """
    key = params.nostr_pubkey()
    if key is None:
        return None
    try:
        npub = encode_npub(key)
    except ValueError as e:
        raise EncodingFailureError(key.hex(), str(e)) from e
    return NostrEncoding(hex=key.hex(), bech32=npub)
