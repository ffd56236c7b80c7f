"""BIP21 ``bitcoin:`` URIs, including unified (on-chain + lightning) QRs.

The URI is read with lwk, which percent-decodes parameters as RFC 3986
does (a ``+`` stays a ``+``). The embedded invoice and offer are then
decoded like standalone ones.

Usage:
    uri = parse_bip21("bitcoin:bc1q...?amount=0.001&lightning=lnbc1m1p...")
    uri.amount_msat()  # 100_000_000
"""

from __future__ import annotations

from dataclasses import dataclass

from lwk import PaymentKind

from btc_query.exceptions import InvalidPaymentError
from btc_query.params import Network, PaymentParamsBase, read_payment
from btc_query.params.bolt11 import Bolt11Invoice, parse_bolt11
from btc_query.params.bolt12 import Bolt12Offer, parse_bolt12
from btc_query.params.onchain import BitcoinAddress, from_lwk_address

_MSAT_PER_SAT = 1000


@dataclass(frozen=True)
class Bip21Uri(PaymentParamsBase):
    """A decoded BIP21 URI with its lightning extensions."""

    on_chain: BitcoinAddress | None = None
    amount: int | None = None
    label: str | None = None
    message: str | None = None
    bolt11: Bolt11Invoice | None = None
    offer: Bolt12Offer | None = None
    payjoin: str | None = None

    def network(self) -> Network | None:
        if self.on_chain is not None:
            return self.on_chain.network()
        if self.bolt11 is not None:
            return self.bolt11.network()
        if self.offer is not None:
            return self.offer.network()
        return None

    def address(self) -> str | None:
        return self.on_chain.address() if self.on_chain else None

    def invoice(self) -> str | None:
        return self.bolt11.invoice() if self.bolt11 else None

    def node_pubkey(self) -> str | None:
        if self.bolt11 is not None:
            return self.bolt11.node_pubkey()
        if self.offer is not None:
            return self.offer.node_pubkey()
        return None

    def amount_msat(self) -> int | None:
        if self.amount is not None:
            return self.amount
        if self.bolt11 is not None:
            return self.bolt11.amount_msat()
        if self.offer is not None:
            return self.offer.amount_msat()
        return None

    def memo(self) -> str | None:
        if self.message or self.label:
            return self.message or self.label
        if self.bolt11 is not None:
            return self.bolt11.memo()
        if self.offer is not None:
            return self.offer.memo()
        return None

    def payjoin_endpoint(self) -> str | None:
        return self.payjoin


def parse_bip21(text: str) -> Bip21Uri:
    """Decode a ``bitcoin:`` URI.

    Raises:
        InvalidPaymentError: If the URI, or any payment it embeds, is invalid.
    """
    s = text.strip()
    if not s.lower().startswith("bitcoin:"):
        raise InvalidPaymentError(text, "not a bitcoin: URI")

    payment = read_payment(s, PaymentKind.BIP21, PaymentKind.BITCOIN_ADDRESS)
    # A URI with no parameters reads as a plain address
    if payment.kind() == PaymentKind.BITCOIN_ADDRESS:
        return Bip21Uri(on_chain=from_lwk_address(payment.bitcoin_address()))

    uri = payment.bip21()
    fields: dict = {}

    address = uri.address()
    if address is not None:
        fields["on_chain"] = from_lwk_address(address)

    amount = uri.amount()
    if amount is not None:
        fields["amount"] = amount * _MSAT_PER_SAT

    if uri.label():
        fields["label"] = uri.label()
    if uri.message():
        fields["message"] = uri.message()

    lightning = uri.lightning()
    if lightning is not None:
        fields["bolt11"] = parse_bolt11(str(lightning))

    offer = uri.offer()
    if offer:
        fields["offer"] = parse_bolt12(offer)

    if uri.payjoin():
        fields["payjoin"] = uri.payjoin()

    return Bip21Uri(**fields)
