"""BOLT12 offer decoding.

Offers are bech32 strings with the ``lno`` prefix and no checksum; long
offers may be split with ``+`` followed by optional whitespace. lwk checks
the offer; it exposes none of its fields, so the descriptive ones are read
from the TLV stream here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from lwk import PaymentKind

from btc_query.encoding import decode_bech32, words_to_bytes
from btc_query.exceptions import InvalidPaymentError
from btc_query.params import Network, PaymentParamsBase, read_payment

_TLV_CHAINS = 2
_TLV_CURRENCY = 6
_TLV_AMOUNT = 8
_TLV_DESCRIPTION = 10
_TLV_ISSUER_ID = 22

# Genesis block hashes in the byte order used on the wire
_CHAIN_HASHES: dict[str, Network] = {
    "6fe28c0ab6f1b372c1a6a246ae63f74f931e8365e15a089c68d6190000000000": Network.BITCOIN,
    "43497fd7f826957108f4a30fd9cec3aeba79972084e90ead01ea330900000000": Network.TESTNET,
    "f61eee3b63a380a477a063af32b2bbc97c9ff9f01f2c4225e973988108000000": Network.SIGNET,
    "06226e46111a0b59caaf126043eb5bbf28c34f3a5e332a1fc7b2b73cf188910f": Network.REGTEST,
}

_JOIN_RE = re.compile(r"\+\s*")


@dataclass(frozen=True)
class Bolt12Offer(PaymentParamsBase):
    """A decoded BOLT12 offer."""

    chain: Network = Network.BITCOIN
    amount: int | None = None
    currency: str | None = None
    description: str | None = None
    issuer_id: str | None = None

    def network(self) -> Network:
        return self.chain

    def node_pubkey(self) -> str | None:
        return self.issuer_id

    def amount_msat(self) -> int | None:
        # A currency-denominated amount is not bitcoin
        return self.amount if self.currency is None else None

    def memo(self) -> str | None:
        return self.description


def read_bigsize(data: bytes, offset: int) -> tuple[int, int]:
    """Read a BOLT1 BigSize integer. Returns (value, next offset)."""
    if offset >= len(data):
        raise ValueError("truncated bigsize")
    first = data[offset]
    if first < 0xFD:
        return first, offset + 1
    width = {0xFD: 2, 0xFE: 4, 0xFF: 8}[first]
    end = offset + 1 + width
    if end > len(data):
        raise ValueError("truncated bigsize")
    return int.from_bytes(data[offset + 1 : end], "big"), end


def read_tlv_stream(data: bytes) -> dict[int, bytes]:
    """Split a TLV stream into {type: value}. Types must strictly increase."""
    records: dict[int, bytes] = {}
    offset = 0
    last_type = -1
    while offset < len(data):
        tlv_type, offset = read_bigsize(data, offset)
        length, offset = read_bigsize(data, offset)
        if tlv_type <= last_type:
            raise ValueError("tlv types out of order")
        if offset + length > len(data):
            raise ValueError("truncated tlv value")
        records[tlv_type] = data[offset : offset + length]
        offset += length
        last_type = tlv_type
    return records


def parse_bolt12(text: str) -> Bolt12Offer:
    """Decode a BOLT12 offer string.

    Raises:
        InvalidPaymentError: If the offer cannot be decoded.
    """
    offer = _JOIN_RE.sub("", text.strip())
    read_payment(offer, PaymentKind.LIGHTNING_OFFER)
    try:
        hrp, words, _ = decode_bech32(offer, checksum=False)
        records = read_tlv_stream(words_to_bytes(words))
    except ValueError as e:
        raise InvalidPaymentError(text, f"bad offer encoding: {e}") from e
    if hrp != "lno":
        raise InvalidPaymentError(text, f"unexpected offer prefix {hrp!r}")
    if not records:
        raise InvalidPaymentError(text, "empty offer")

    fields: dict = {}
    chains = records.get(_TLV_CHAINS)
    if chains is not None:
        if not chains or len(chains) % 32:
            raise InvalidPaymentError(text, "malformed offer_chains")
        network = _CHAIN_HASHES.get(chains[:32].hex())
        if network is None:
            raise InvalidPaymentError(text, "offer for an unknown chain")
        fields["chain"] = network

    try:
        if _TLV_CURRENCY in records:
            fields["currency"] = records[_TLV_CURRENCY].decode("utf-8")
        if _TLV_DESCRIPTION in records:
            fields["description"] = records[_TLV_DESCRIPTION].decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidPaymentError(text, "offer text field is not utf-8") from e

    if _TLV_AMOUNT in records:
        amount = records[_TLV_AMOUNT]
        if len(amount) > 8:
            raise InvalidPaymentError(text, "malformed offer_amount")
        fields["amount"] = int.from_bytes(amount, "big")

    issuer_id = records.get(_TLV_ISSUER_ID)
    if issuer_id is not None:
        if len(issuer_id) != 33:
            raise InvalidPaymentError(text, "malformed offer_issuer_id")
        fields["issuer_id"] = issuer_id.hex()

    return Bolt12Offer(**fields)
