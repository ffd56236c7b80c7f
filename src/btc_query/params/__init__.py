"""Payment parameter decoders.

On-chain addresses, BIP21 URIs and BOLT12 offers are read with lwk's
``Payment``; LNURLs and Lightning Addresses with the ``lnurl`` package. BOLT11
invoices, node public keys and nostr public keys are decoded here.

Each variant implements PaymentParamsBase; every accessor is a capability
query that returns None when the variant does not carry that field.

Usage:
    from btc_query.params import parse_payment

    params = parse_payment("lnbc10u1p...")
    params.amount_msat()  # 1_000_000
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Union

from lwk import LwkError, Payment, PaymentKind

from btc_query.exceptions import InvalidPaymentError


class Network(str, Enum):
    """Bitcoin network a payment string is bound to."""

    BITCOIN = "bitcoin"
    TESTNET = "testnet"
    SIGNET = "signet"
    REGTEST = "regtest"


class PaymentParamsBase:
    """Accessors shared by every decoded payment string."""

    def network(self) -> Network | None:
        return None

    def address(self) -> str | None:
        """On-chain address text."""
        return None

    def invoice(self) -> str | None:
        """BOLT11 invoice text."""
        return None

    def node_pubkey(self) -> str | None:
        """Lightning node id as compressed-key hex."""
        return None

    def amount_msat(self) -> int | None:
        return None

    def memo(self) -> str | None:
        return None

    def lnurl(self) -> str | None:
        """Bech32 LNURL text."""
        return None

    def lightning_address(self) -> str | None:
        return None

    def payjoin_endpoint(self) -> str | None:
        return None

    def nostr_pubkey(self) -> bytes | None:
        """32-byte x-only nostr identity key."""
        return None


def read_payment(text: str, *expected: PaymentKind) -> Payment:
    """Parse ``text`` with lwk and check it is one of the ``expected`` kinds.

    Raises:
        InvalidPaymentError: If lwk rejects the string or reads it as a
            different kind of payment.
    """
    try:
        payment = Payment(text)
    except LwkError as e:
        raise InvalidPaymentError(text, f"unrecognized payment: {e}") from e
    kind = payment.kind()
    if kind not in expected:
        raise InvalidPaymentError(text, f"unexpected payment kind {kind.name.lower()}")
    return payment


# Variants import PaymentParamsBase from this module, so they load last
from btc_query.params.bip21 import Bip21Uri, parse_bip21  # noqa: E402
from btc_query.params.bolt11 import Bolt11Invoice, parse_bolt11  # noqa: E402
from btc_query.params.bolt12 import Bolt12Offer, parse_bolt12  # noqa: E402
from btc_query.params.lnurl import (  # noqa: E402
    LightningAddress,
    LnUrl,
    parse_lightning_address,
    parse_lnurl,
)
from btc_query.params.node import NodePubkey, parse_node_pubkey  # noqa: E402
from btc_query.params.nostr import NostrPubkey, parse_nostr  # noqa: E402
from btc_query.params.onchain import BitcoinAddress, parse_address  # noqa: E402

PaymentParams = Union[
    BitcoinAddress,
    Bip21Uri,
    Bolt11Invoice,
    Bolt12Offer,
    NodePubkey,
    LnUrl,
    LightningAddress,
    NostrPubkey,
]

_LIGHTNING_SCHEME_RE = re.compile(r"^lightning:", re.IGNORECASE)
_LNURL_SCHEME_RE = re.compile(r"^(lnurl[pwc]|keyauth)://", re.IGNORECASE)
_NODE_ID_RE = re.compile(r"^(02|03)[0-9a-fA-F]{64}(@|$)")


def parse_payment(text: str) -> PaymentParams:
    """Decode a payment string into one of the PaymentParams variants.

    Args:
        text: Any user-supplied string.

    Returns:
        The decoded payment parameters.

    Raises:
        InvalidPaymentError: If the string is not a recognized payment format
            or is malformed for the format its prefix announces.
    """
    s = (text or "").strip()
    if not s:
        raise InvalidPaymentError(text, "empty string")

    if s.lower().startswith("bitcoin:"):
        return parse_bip21(s)

    s = _LIGHTNING_SCHEME_RE.sub("", s, count=1)
    lowered = s.lower()

    if _NODE_ID_RE.match(s):
        return parse_node_pubkey(s)
    if lowered.startswith(("npub1", "nprofile1", "nostr:")):
        return parse_nostr(s)
    if lowered.startswith("lnurl1") or _LNURL_SCHEME_RE.match(s):
        return parse_lnurl(s)
    if "@" in s:
        return parse_lightning_address(s)
    if lowered.startswith("lno1"):
        return parse_bolt12(s)
    if lowered.startswith("ln"):
        return parse_bolt11(s)
    return parse_address(s)


__all__ = [
    "Network",
    "PaymentParams",
    "PaymentParamsBase",
    "parse_payment",
    "BitcoinAddress",
    "Bip21Uri",
    "Bolt11Invoice",
    "Bolt12Offer",
    "NodePubkey",
    "LnUrl",
    "LightningAddress",
    "NostrPubkey",
]
