"""End-to-end tests for the query engine."""

import json

import pytest

from btc_query import query
from btc_query.classifier import NostrPolicy
from btc_query.engine import QueryOptions, render_record, run_query
from btc_query.exceptions import ParseFailureError, SerializationFailureError
from btc_query.projection import FIELD_NAMES, OutputShape
from btc_query.units import resolve_unit
from conftest import INVOICE_PAYEE, NOSTR_KEY, build_invoice

ACCEPT = QueryOptions(nostr_policy=NostrPolicy.ACCEPT)


class TestRunQuery:
    @pytest.mark.parametrize("shape", list(OutputShape))
    def test_not_a_bitcoin_string(self, shape):
        options = QueryOptions(nostr_policy=NostrPolicy.ACCEPT, shape=shape, include_nostr=True)
        with pytest.raises(ParseFailureError, match="not a known bitcoin string"):
            run_query("notabitcoinstring", options)

    def test_on_chain_sparse(self, p2wpkh_address):
        options = QueryOptions(nostr_policy=NostrPolicy.ACCEPT, shape=OutputShape.SPARSE)
        record = run_query(p2wpkh_address, options)
        assert record == {"kind": "OnChain", "network": "bitcoin", "address": p2wpkh_address}

    def test_legacy_address_sparse(self):
        options = QueryOptions(nostr_policy=NostrPolicy.ACCEPT, shape=OutputShape.SPARSE)
        record = run_query("1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa", options)
        assert record["kind"] == "OnChain"
        assert record["address"] == "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"

    def test_invoice_full_in_btc(self):
        invoice = build_invoice("lnbc10u", description="coffee")
        options = QueryOptions(nostr_policy=NostrPolicy.ACCEPT, unit=resolve_unit("btc"))
        record = run_query(invoice, options)
        assert record == {
            "kind": "Invoice",
            "network": "bitcoin",
            "address": None,
            "invoice": invoice,
            "pubkey": INVOICE_PAYEE,
            "amount": "0.00001 BTC",
            "memo": "coffee",
            "lnurl": None,
            "lnaddr": None,
            "payjoin": None,
        }

    def test_full_record_for_every_kind(self, sample_queries):
        for tag, text in sample_queries.items():
            record = run_query(text, ACCEPT)
            assert record["kind"] == tag
            assert list(record) == ["kind", *FIELD_NAMES]

    def test_sparse_never_contains_null(self, sample_queries):
        sparse = QueryOptions(nostr_policy=NostrPolicy.ACCEPT, shape=OutputShape.SPARSE)
        for text in sample_queries.values():
            full = run_query(text, ACCEPT)
            assert run_query(text, sparse) == {k: v for k, v in full.items() if v is not None}

    def test_nostr_value_with_exposure(self, npub):
        options = QueryOptions(nostr_policy=NostrPolicy.REJECT, include_nostr=True)
        record = run_query(npub, options)
        assert record["kind"] == "NostrValue"
        assert record["nostr"] == {"hex": NOSTR_KEY.hex(), "bech32": npub}

    def test_nostr_value_rejected_without_exposure(self, npub):
        with pytest.raises(ParseFailureError):
            run_query(npub, QueryOptions(nostr_policy=NostrPolicy.REJECT))

    def test_nostr_value_accepted_without_exposure(self, npub):
        record = run_query(npub, ACCEPT)
        assert record["kind"] == "NostrValue"
        assert "nostr" not in record

    def test_nostr_null_for_other_kinds(self, p2wpkh_address):
        options = QueryOptions(nostr_policy=NostrPolicy.ACCEPT, include_nostr=True)
        assert run_query(p2wpkh_address, options)["nostr"] is None

    def test_idempotent(self, sample_queries):
        options = QueryOptions(
            nostr_policy=NostrPolicy.ACCEPT, unit=resolve_unit("mbtc"), include_nostr=True
        )
        for text in sample_queries.values():
            first = render_record(run_query(text, options))
            second = render_record(run_query(text, options))
            assert first == second


class TestQueryConvenience:
    def test_plain_values(self, p2wpkh_address):
        record = query(p2wpkh_address, nostr_policy=NostrPolicy.ACCEPT, sparse=True)
        assert record == {"kind": "OnChain", "network": "bitcoin", "address": p2wpkh_address}

    def test_unit_token(self):
        invoice = build_invoice("lnbc10u")
        record = query(invoice, nostr_policy=NostrPolicy.ACCEPT, unit="msat")
        assert record["amount"] == "1000000 msat"


class TestRenderRecord:
    def test_compact(self):
        assert render_record({"kind": "OnChain", "memo": None}) == '{"kind":"OnChain","memo":null}'

    def test_pretty(self):
        text = render_record({"kind": "OnChain"}, pretty=True)
        assert text == '{\n  "kind": "OnChain"\n}'

    def test_non_ascii_kept(self):
        assert "☕" in render_record({"memo": "☕"})

    def test_unserializable_raises(self):
        with pytest.raises(SerializationFailureError, match="error creating json output caused by"):
            render_record({"kind": object()})

    def test_round_trips_through_json(self, sample_queries):
        record = run_query(sample_queries["UnifiedUri"], ACCEPT)
        assert json.loads(render_record(record)) == record
