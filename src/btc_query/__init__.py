"""btc-query: identify bitcoin and lightning payment strings.

Classifies an on-chain address, BIP21 URI, BOLT11 invoice, BOLT12 offer,
node public key, LNURL, Lightning Address or nostr key and reports its
fields as a flat JSON-ready record.

Usage:
    import btc_query

    record = btc_query.query(
        "lnbc10u1p...", nostr_policy=btc_query.NostrPolicy.ACCEPT, unit="btc"
    )
    # {"kind": "Invoice", "network": "bitcoin", ..., "amount": "0.00001 BTC", ...}

    # Or build the options yourself
    from btc_query import NostrPolicy, OutputShape, QueryOptions, run_query

    options = QueryOptions(
        nostr_policy=NostrPolicy.REJECT,
        shape=OutputShape.SPARSE,
    )
    record = run_query("bc1q...", options)
"""

from typing import Any

from btc_query.classifier import Kind, NostrPolicy, classify, kind_of
from btc_query.engine import QueryOptions, render_record, run_query
from btc_query.exceptions import (
    BtcQueryError,
    EncodingFailureError,
    InvalidPaymentError,
    ParseFailureError,
    SerializationFailureError,
)
from btc_query.nostr_keys import NostrEncoding, encode_nostr
from btc_query.params import Network, PaymentParams, parse_payment
from btc_query.projection import OutputShape, ProjectedFields, project
from btc_query.record import assemble_record
from btc_query.units import Denomination, format_amount, resolve_unit

__version__ = "0.1.0"

__all__ = [
    # Engine
    "QueryOptions",
    "run_query",
    "render_record",
    "query",
    # Stages
    "Kind",
    "NostrPolicy",
    "classify",
    "kind_of",
    "OutputShape",
    "ProjectedFields",
    "project",
    "NostrEncoding",
    "encode_nostr",
    "assemble_record",
    # Units
    "Denomination",
    "resolve_unit",
    "format_amount",
    # Parsing
    "Network",
    "PaymentParams",
    "parse_payment",
    # Exceptions
    "BtcQueryError",
    "InvalidPaymentError",
    "ParseFailureError",
    "EncodingFailureError",
    "SerializationFailureError",
]


def query(
    text: str,
    *,
    nostr_policy: NostrPolicy,
    unit: str = "sat",
    sparse: bool = False,
    nostr: bool = False,
) -> dict[str, Any]:
    """Convenience: run one query with options given as plain values."""
    options = QueryOptions(
        nostr_policy=nostr_policy,
        unit=resolve_unit(unit),
        shape=OutputShape.SPARSE if sparse else OutputShape.FULL,
        include_nostr=nostr,
    )
    return run_query(text, options)
