"""Single-shot query engine: one string in, one record (or an error) out.

Usage:
    from btc_query.engine import NostrPolicy, QueryOptions, render_record, run_query
    from btc_query.units import resolve_unit

    options = QueryOptions(nostr_policy=NostrPolicy.ACCEPT, unit=resolve_unit("btc"))
    record = run_query("lnbc10u1p...", options)
    print(render_record(record, pretty=True))
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from btc_query.classifier import NostrPolicy, classify
from btc_query.exceptions import SerializationFailureError
from btc_query.nostr_keys import encode_nostr
from btc_query.projection import OutputShape, project
from btc_query.record import assemble_record
from btc_query.units import Denomination


@dataclass(frozen=True)
class QueryOptions:
    """Per-invocation options.

    Args:
        nostr_policy: Required, no default. See NostrPolicy.
        unit: Denomination for the amount field.
        shape: FULL or SPARSE output.
        include_nostr: Add the ``nostr`` key to the record.
    """

    nostr_policy: NostrPolicy
    unit: Denomination = Denomination.SATOSHI
    shape: OutputShape = OutputShape.FULL
    include_nostr: bool = False


def run_query(query: str, options: QueryOptions) -> dict[str, Any]:
    """Classify ``query`` and build its output record.

    Raises:
        ParseFailureError: If the query is not a known payment string.
        EncodingFailureError: If nostr output was requested and the key
            cannot be encoded.
    """
    kind, params = classify(
        query,
        nostr_policy=options.nostr_policy,
        include_nostr=options.include_nostr,
    )
    fields = project(params, options.unit)
    nostr = encode_nostr(params) if options.include_nostr else None
    return assemble_record(
        kind,
        fields,
        options.shape,
        nostr=nostr,
        include_nostr=options.include_nostr,
    )


def render_record(record: dict[str, Any], pretty: bool = False) -> str:
    """Serialize a record to JSON text.

    Raises:
        SerializationFailureError: If the record holds unserializable values.
    """
    try:
        if pretty:
            return json.dumps(record, indent=2, ensure_ascii=False, allow_nan=False)
        return json.dumps(
            record, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError) as e:
        raise SerializationFailureError(str(e)) from e
