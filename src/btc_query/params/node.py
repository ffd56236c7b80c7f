"""Lightning node identities: a bare public key or ``pubkey@host:port``."""

from __future__ import annotations

from dataclasses import dataclass

from btc_query.exceptions import InvalidPaymentError
from btc_query.keys import validate_compressed_pubkey
from btc_query.params import PaymentParamsBase


@dataclass(frozen=True)
class NodePubkey(PaymentParamsBase):
    """A node id. A listening address, when given, is checked but not kept."""

    pubkey: str

    def node_pubkey(self) -> str:
        return self.pubkey


def parse_node_pubkey(text: str) -> NodePubkey:
    """Decode a node id or node connection string.

    Raises:
        InvalidPaymentError: If the key is malformed or off the curve.
    """
    key_hex, _, host = text.strip().partition("@")
    try:
        key = bytes.fromhex(key_hex)
        validate_compressed_pubkey(key)
    except ValueError as e:
        raise InvalidPaymentError(text, f"bad node public key: {e}") from e
    if "@" in text and not host:
        raise InvalidPaymentError(text, "missing node host")
    return NodePubkey(pubkey=key.hex())
