"""Pure Python BOLT11 invoice decoding.

BOLT11 format: ln{bc|tb|tbs|bcrt}{amount}{multiplier}1{data}{checksum}
Multipliers: m (milli = 0.001), u (micro = 0.000001),
             n (nano = 0.000000001), p (pico = 0.000000000001)

The data part is a 35-bit timestamp, a run of tagged fields and a 65-byte
recoverable signature. Only the fields this project reports are kept; the
payment hash is checked for presence.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass

from btc_query.encoding import (
    CHARSET,
    Bech32Variant,
    decode_bech32,
    words_to_bytes,
    words_to_bytes_padded,
)
from btc_query.exceptions import InvalidPaymentError
from btc_query.keys import recover_pubkey
from btc_query.params import Network, PaymentParamsBase
from btc_query.params.onchain import fallback_address

# Match: ln + currency + optional(amount + optional multiplier), whole HRP
_HRP_RE = re.compile(
    r"^ln(?P<currency>bcrt|bc|tbs|tb)"
    r"(?P<amount>[1-9]\d*)?"
    r"(?P<multiplier>[munp])?$"
)

_CURRENCIES: dict[str, Network] = {
    "bc": Network.BITCOIN,
    "tb": Network.TESTNET,
    "tbs": Network.SIGNET,
    "bcrt": Network.REGTEST,
}

# Millisatoshis per unit of the HRP amount. Pico is a tenth of a msat and
# is handled separately.
_MSAT_MULTIPLIERS: dict[str | None, int] = {
    None: 100_000_000_000,
    "m": 100_000_000,
    "u": 100_000,
    "n": 100,
}

_TIMESTAMP_WORDS = 7
_SIGNATURE_WORDS = 104

_TAG_PAYMENT_HASH = CHARSET.index("p")
_TAG_DESCRIPTION = CHARSET.index("d")
_TAG_PAYEE = CHARSET.index("n")
_TAG_FALLBACK = CHARSET.index("f")


@dataclass(frozen=True)
class Bolt11Invoice(PaymentParamsBase):
    """A decoded BOLT11 invoice."""

    text: str
    currency: Network
    amount: int | None
    payee: str
    description: str | None = None
    fallback: str | None = None

    def network(self) -> Network:
        return self.currency

    def address(self) -> str | None:
        return self.fallback

    def invoice(self) -> str:
        return self.text

    def node_pubkey(self) -> str:
        return self.payee

    def amount_msat(self) -> int | None:
        return self.amount

    def memo(self) -> str | None:
        return self.description


def decode_amount_msat(hrp: str) -> int | None:
    """Extract the amount in millisatoshis from a BOLT11 human-readable part.

    Returns:
        The amount, or None for "any amount" invoices.

    Raises:
        ValueError: If the HRP is malformed or the pico amount is not a
            whole number of millisatoshis.
    """
    match = _HRP_RE.match(hrp.lower())
    if not match:
        raise ValueError(f"malformed invoice prefix {hrp!r}")

    amount_str = match.group("amount")
    if amount_str is None:
        # No amount specified: an "any amount" invoice
        if match.group("multiplier"):
            raise ValueError("multiplier without amount")
        return None

    amount = int(amount_str)
    multiplier = match.group("multiplier")
    if multiplier == "p":
        if amount % 10:
            raise ValueError("pico amount is not a whole millisatoshi")
        return amount // 10
    return amount * _MSAT_MULTIPLIERS[multiplier]


def parse_bolt11(text: str) -> Bolt11Invoice:
    """Decode a BOLT11 invoice string.

    Args:
        text: A BOLT11-encoded Lightning invoice (e.g., "lnbc10u1p...").

    Returns:
        The decoded invoice. The payee is the explicit ``n`` field when
        present, else the key recovered from the signature.

    Raises:
        InvalidPaymentError: If the invoice cannot be decoded.
    """
    invoice = text.strip()
    try:
        hrp, words, variant = decode_bech32(invoice)
    except ValueError as e:
        raise InvalidPaymentError(text, f"bad bech32 invoice: {e}") from e
    if variant is not Bech32Variant.BECH32:
        raise InvalidPaymentError(text, "invoice must use a bech32 checksum")

    try:
        amount = decode_amount_msat(hrp)
    except ValueError as e:
        raise InvalidPaymentError(text, str(e)) from e
    currency = _CURRENCIES[_HRP_RE.match(hrp).group("currency")]

    if len(words) < _TIMESTAMP_WORDS + _SIGNATURE_WORDS:
        raise InvalidPaymentError(text, "invoice too short")

    data, sig_words = words[:-_SIGNATURE_WORDS], words[-_SIGNATURE_WORDS:]
    fields = _read_tagged_fields(text, data[_TIMESTAMP_WORDS:], currency)

    payee = fields.pop("payee", None)
    if payee is None:
        signature = words_to_bytes(sig_words)
        signed = hrp.encode("utf-8") + words_to_bytes_padded(data)
        digest = hashlib.sha256(signed).digest()
        try:
            payee = recover_pubkey(signature[:64], signature[64], digest).hex()
        except ValueError as e:
            raise InvalidPaymentError(text, str(e)) from e

    return Bolt11Invoice(
        text=invoice.lower(),
        currency=currency,
        amount=amount,
        payee=payee,
        **fields,
    )


def _read_tagged_fields(text: str, words: list[int], currency: Network) -> dict:
    fields: dict = {}
    has_payment_hash = False
    i = 0
    while i < len(words):
        if i + 3 > len(words):
            raise InvalidPaymentError(text, "truncated tagged field")
        tag = words[i]
        length = words[i + 1] * 32 + words[i + 2]
        value = words[i + 3 : i + 3 + length]
        if len(value) != length:
            raise InvalidPaymentError(text, "truncated tagged field")
        i += 3 + length

        # Fields with an unexpected length are skipped, first occurrence wins
        if tag == _TAG_PAYMENT_HASH and length == 52:
            has_payment_hash = True
        elif tag == _TAG_PAYEE and length == 53:
            fields.setdefault("payee", words_to_bytes(value).hex())
        elif tag == _TAG_DESCRIPTION:
            if "description" not in fields:
                try:
                    fields["description"] = words_to_bytes(value).decode("utf-8")
                except UnicodeDecodeError as e:
                    raise InvalidPaymentError(text, "description is not utf-8") from e
        elif tag == _TAG_FALLBACK and length > 0 and "fallback" not in fields:
            address = fallback_address(currency, value[0], words_to_bytes(value[1:]))
            if address is not None:
                fields["fallback"] = address

    if not has_payment_hash:
        raise InvalidPaymentError(text, "missing payment hash")
    return fields
