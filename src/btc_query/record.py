"""Assemble the output record handed to the serializer."""

from __future__ import annotations

from typing import Any

from btc_query.classifier import Kind
from btc_query.nostr_keys import NostrEncoding
from btc_query.projection import OutputShape, ProjectedFields


def assemble_record(
    kind: Kind,
    fields: ProjectedFields,
    shape: OutputShape,
    *,
    nostr: NostrEncoding | None = None,
    include_nostr: bool = False,
) -> dict[str, Any]:
    """Build the output record.

    ``kind`` always comes first. The ``nostr`` key is present only when
    ``include_nostr`` is set, whatever the shape, and is None when the
    payment carried no nostr key.
    """
    record: dict[str, Any] = {"kind": kind.value}
    record.update(fields.entries(shape))
    if include_nostr:
        record["nostr"] = nostr.as_dict() if nostr is not None else None
    return record
