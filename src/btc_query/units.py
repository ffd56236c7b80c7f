"""Bitcoin denominations and amount rendering.

Amounts travel through the project as integer millisatoshis and are only
turned into text at the edge, in the denomination the caller asked for:

    btc  -> "0.00001 BTC"
    mbtc -> "0.01 mBTC"
    sat  -> "1000 satoshi"
    msat -> "1000000 msat"
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum


class Denomination(Enum):
    """Unit scale for rendering an amount, valued in millisatoshis per unit."""

    BITCOIN = 100_000_000_000
    MILLI_BITCOIN = 100_000_000
    SATOSHI = 1_000
    MILLI_SATOSHI = 1

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[Denomination, str] = {
    Denomination.BITCOIN: "BTC",
    Denomination.MILLI_BITCOIN: "mBTC",
    Denomination.SATOSHI: "satoshi",
    Denomination.MILLI_SATOSHI: "msat",
}

# Case-sensitive. Anything else, "sat" included, falls through to satoshi.
_UNIT_TOKENS: dict[str, Denomination] = {
    "btc": Denomination.BITCOIN,
    "mbtc": Denomination.MILLI_BITCOIN,
    "msat": Denomination.MILLI_SATOSHI,
}


def resolve_unit(token: str | None) -> Denomination:
    """Map a user-supplied unit token to a Denomination. Never fails."""
    return _UNIT_TOKENS.get(token or "", Denomination.SATOSHI)


def format_amount(amount_msat: int, denomination: Denomination) -> str:
    """Render a millisatoshi amount as text in the given denomination.

    Args:
        amount_msat: Amount in millisatoshis.
        denomination: Target unit.

    Returns:
        The decimal value without trailing fractional zeros, a space and
        the unit label, e.g. "0.00001 BTC".
    """
    value = Decimal(amount_msat) / Decimal(denomination.value)
    # normalize() can produce an exponent ("1E+3"); "f" expands it back
    text = format(value.normalize(), "f")
    return f"{text} {denomination.label}"
