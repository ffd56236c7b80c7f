"""Tests for payment string dispatch."""

import pytest

from btc_query.exceptions import InvalidPaymentError
from btc_query.params import (
    BitcoinAddress,
    Bip21Uri,
    Bolt11Invoice,
    Bolt12Offer,
    LightningAddress,
    LnUrl,
    NodePubkey,
    NostrPubkey,
    parse_payment,
)
from conftest import build_invoice

EXPECTED_TYPES = {
    "OnChain": BitcoinAddress,
    "UnifiedUri": Bip21Uri,
    "Invoice": Bolt11Invoice,
    "Offer": Bolt12Offer,
    "PublicKey": NodePubkey,
    "LnUrl": LnUrl,
    "LnAddress": LightningAddress,
    "NostrValue": NostrPubkey,
}


class TestParsePayment:
    @pytest.mark.parametrize("kind", sorted(EXPECTED_TYPES))
    def test_dispatches_each_kind(self, sample_queries, kind):
        assert isinstance(parse_payment(sample_queries[kind]), EXPECTED_TYPES[kind])

    def test_strips_whitespace(self, p2wpkh_address):
        assert parse_payment(f"  {p2wpkh_address}\n").address() == p2wpkh_address

    def test_lightning_scheme_prefix(self):
        invoice = build_invoice("lnbc10u")
        assert parse_payment(f"lightning:{invoice}").invoice() == invoice
        assert parse_payment(f"LIGHTNING:{invoice}").invoice() == invoice

    def test_empty_raises(self):
        with pytest.raises(InvalidPaymentError, match="empty"):
            parse_payment("   ")

    def test_garbage_raises(self):
        with pytest.raises(InvalidPaymentError):
            parse_payment("notabitcoinstring")

    def test_lightning_address_starting_with_ln(self):
        assert isinstance(parse_payment("lnbits@example.com"), LightningAddress)

    def test_lightning_address_with_scheme_and_capitals(self):
        address = parse_payment("lightning:Satoshi@Example.com")
        assert address.lightning_address() == "satoshi@example.com"

    def test_liquid_address_rejected(self):
        with pytest.raises(InvalidPaymentError, match="unexpected payment kind"):
            parse_payment(
                "lq1qqduq2l8maf4580wle4hevmk62xqqw3quckshkt2rex3ylw83824y4g96xl0uugdz4qks5v7w4pd"
                "pvztyy5kw7r7e56jcwm0p0"
            )
