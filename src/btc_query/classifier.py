"""Classify a query string as one of the supported payment kinds."""

from __future__ import annotations

from enum import Enum
from typing import assert_never

import structlog

from btc_query.exceptions import InvalidPaymentError, ParseFailureError
from btc_query.params import (
    BitcoinAddress,
    Bip21Uri,
    Bolt11Invoice,
    Bolt12Offer,
    LightningAddress,
    LnUrl,
    NodePubkey,
    NostrPubkey,
    PaymentParams,
    parse_payment,
)

logger = structlog.get_logger(__name__)


class Kind(str, Enum):
    """Semantic category of a recognized payment string."""

    ON_CHAIN = "OnChain"
    UNIFIED_URI = "UnifiedUri"
    INVOICE = "Invoice"
    OFFER = "Offer"
    PUBLIC_KEY = "PublicKey"
    LN_URL = "LnUrl"
    LN_ADDRESS = "LnAddress"
    NOSTR_VALUE = "NostrValue"


class NostrPolicy(Enum):
    """What to do with a nostr key when the caller did not ask for nostr output.

    REJECT: report it as not a bitcoin string.
    ACCEPT: classify it as NostrValue like any other kind.
    """

    REJECT = "reject"
    ACCEPT = "accept"


def kind_of(params: PaymentParams) -> Kind:
    """Map a decoded payment to its Kind.

    Every PaymentParams variant needs a case here; a type checker flags a
    missing one through assert_never.
    """
    match params:
        case BitcoinAddress():
            return Kind.ON_CHAIN
        case Bip21Uri():
            return Kind.UNIFIED_URI
        case Bolt11Invoice():
            return Kind.INVOICE
        case Bolt12Offer():
            return Kind.OFFER
        case NodePubkey():
            return Kind.PUBLIC_KEY
        case LnUrl():
            return Kind.LN_URL
        case LightningAddress():
            return Kind.LN_ADDRESS
        case NostrPubkey():
            return Kind.NOSTR_VALUE
        case _:
            assert_never(params)


def classify(
    query: str,
    *,
    nostr_policy: NostrPolicy,
    include_nostr: bool = False,
) -> tuple[Kind, PaymentParams]:
    """Decode ``query`` and determine its Kind.

    Args:
        query: The raw user-supplied string.
        nostr_policy: How to treat a nostr key when include_nostr is False.
        include_nostr: Whether the caller asked for nostr output.

    Returns:
        (kind, decoded payment parameters).

    Raises:
        ParseFailureError: If the string is not a known payment string, or
            is a nostr key rejected by ``nostr_policy``.
    """
    try:
        params = parse_payment(query)
    except InvalidPaymentError as e:
        logger.debug("Query rejected by parser", reason=e.reason)
        raise ParseFailureError(query) from e

    kind = kind_of(params)
    if (
        kind is Kind.NOSTR_VALUE
        and not include_nostr
        and nostr_policy is NostrPolicy.REJECT
    ):
        logger.info("Nostr key rejected without nostr output", policy=nostr_policy.value)
        raise ParseFailureError(query)

    logger.debug("Query classified", kind=kind.value)
    return kind, params
