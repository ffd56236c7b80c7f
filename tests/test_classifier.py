"""Tests for payment classification."""

import pytest

from btc_query.classifier import Kind, NostrPolicy, classify, kind_of
from btc_query.exceptions import ParseFailureError
from btc_query.params import Bolt11Invoice, parse_payment


class TestKindOf:
    def test_every_kind_reachable(self, sample_queries):
        kinds = {kind_of(parse_payment(q)) for q in sample_queries.values()}
        assert kinds == set(Kind)

    @pytest.mark.parametrize("tag", [k.value for k in Kind])
    def test_tags_match_queries(self, sample_queries, tag):
        assert kind_of(parse_payment(sample_queries[tag])).value == tag

    def test_tag_is_stable(self, sample_queries):
        query = sample_queries["Invoice"]
        assert kind_of(parse_payment(query)) is kind_of(parse_payment(query))


class TestClassify:
    def test_returns_kind_and_params(self, sample_queries):
        kind, params = classify(sample_queries["Invoice"], nostr_policy=NostrPolicy.ACCEPT)
        assert kind is Kind.INVOICE
        assert isinstance(params, Bolt11Invoice)

    def test_not_a_bitcoin_string(self):
        with pytest.raises(ParseFailureError, match="^not a known bitcoin string$"):
            classify("notabitcoinstring", nostr_policy=NostrPolicy.ACCEPT)

    def test_parse_failure_chains_reason(self):
        with pytest.raises(ParseFailureError) as exc_info:
            classify("notabitcoinstring", nostr_policy=NostrPolicy.REJECT)
        assert exc_info.value.query == "notabitcoinstring"
        assert exc_info.value.__cause__ is not None

    def test_nostr_rejected_without_exposure(self, npub):
        with pytest.raises(ParseFailureError, match="not a known bitcoin string"):
            classify(npub, nostr_policy=NostrPolicy.REJECT)

    def test_nostr_rejected_policy_allows_with_exposure(self, npub):
        kind, _ = classify(npub, nostr_policy=NostrPolicy.REJECT, include_nostr=True)
        assert kind is Kind.NOSTR_VALUE

    def test_nostr_accepted_without_exposure(self, npub):
        kind, _ = classify(npub, nostr_policy=NostrPolicy.ACCEPT)
        assert kind is Kind.NOSTR_VALUE

    def test_policy_only_affects_nostr(self, sample_queries):
        kind, _ = classify(sample_queries["OnChain"], nostr_policy=NostrPolicy.REJECT)
        assert kind is Kind.ON_CHAIN
