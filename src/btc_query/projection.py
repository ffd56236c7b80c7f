"""Project a decoded payment onto the fixed set of output fields."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from btc_query.params import PaymentParams
from btc_query.units import Denomination, format_amount

FIELD_NAMES = (
    "network",
    "address",
    "invoice",
    "pubkey",
    "amount",
    "memo",
    "lnurl",
    "lnaddr",
    "payjoin",
)


class OutputShape(Enum):
    """FULL keeps every field key (unset ones as None); SPARSE drops unset keys."""

    FULL = "full"
    SPARSE = "sparse"


@dataclass(frozen=True)
class ProjectedFields:
    """The optional fields of an output record. ``amount`` is already text."""

    network: str | None = None
    address: str | None = None
    invoice: str | None = None
    pubkey: str | None = None
    amount: str | None = None
    memo: str | None = None
    lnurl: str | None = None
    lnaddr: str | None = None
    payjoin: str | None = None

    def entries(self, shape: OutputShape) -> dict[str, str | None]:
        """Field name -> value, in FIELD_NAMES order, shaped by ``shape``."""
        values = {name: getattr(self, name) for name in FIELD_NAMES}
        if shape is OutputShape.SPARSE:
            return {name: value for name, value in values.items() if value is not None}
        return values


def project(params: PaymentParams, denomination: Denomination) -> ProjectedFields:
    """Query each accessor of ``params`` once and collect the results.

    The amount is rendered in ``denomination``; the raw number never
    leaves this function.
    """
    network = params.network()
    amount = params.amount_msat()
    return ProjectedFields(
        network=network.value if network is not None else None,
        address=params.address(),
        invoice=params.invoice(),
        pubkey=params.node_pubkey(),
        amount=format_amount(amount, denomination) if amount is not None else None,
        memo=params.memo(),
        lnurl=params.lnurl(),
        lnaddr=params.lightning_address(),
        payjoin=params.payjoin_endpoint(),
    )
