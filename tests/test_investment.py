"""Unit tests for investment text parsing."""

import pytest

from metro_core.investment import detect_currency, format_investment, parse_investment


class TestParseInvestment:
    """Amount and currency extraction."""

    def test_dollar_billions(self):
        inv = parse_investment("$3.2B")
        assert inv.parsed
        assert inv.amount == pytest.approx(3.2)
        assert inv.currency == "USD"
        assert inv.raw == "$3.2B"

    def test_euro_symbol(self):
        inv = parse_investment("€5.3B")
        assert inv.currency == "EUR"
        assert inv.amount == pytest.approx(5.3)

    def test_code_prefix_and_suffix(self):
        assert parse_investment("SGD 5.7B").currency == "SGD"
        assert parse_investment("5.7B EUR").currency == "EUR"
        assert parse_investment("5.7B EUR").amount == pytest.approx(5.7)

    def test_dollar_variants(self):
        assert detect_currency("S$5.7B") == "SGD"
        assert detect_currency("HK$12B") == "HKD"
        assert detect_currency("US$ 2B") == "USD"

    @pytest.mark.parametrize(
        "raw, currency",
        [
            ("NZ$2.0B", "NZD"),
            ("NT$45B", "TWD"),
            ("R$3B", "BRL"),
            ("MX$1.5B", "MXN"),
            ("AU$4B", "AUD"),
            ("A$4B", "AUD"),
            ("CA$1B", "CAD"),
            ("C$1B", "CAD"),
            ("ZW$9B", "ZW$"),
        ],
    )
    def test_prefixed_dollars_are_not_usd(self, raw, currency):
        assert parse_investment(raw).currency == currency

    @pytest.mark.parametrize(
        "raw, currency",
        [
            ("€5.3B (~$5.8B)", "EUR"),
            ("$5.8B (€5.3B)", "USD"),
            ("5.7B EUR (approx. $6.2B)", "EUR"),
            ("SGD 5.7B", "SGD"),
        ],
    )
    def test_marker_nearest_the_amount_wins(self, raw, currency):
        assert parse_investment(raw).currency == currency

    def test_unknown_capitals_are_not_a_currency(self):
        inv = parse_investment("3.2B EST")
        assert inv.amount == pytest.approx(3.2)
        assert inv.currency is None

    def test_magnitude_suffixes(self):
        assert parse_investment("$450M").amount == pytest.approx(0.45)
        assert parse_investment("$1,200 million").amount == pytest.approx(1.2)
        assert parse_investment("€1.1 trillion").amount == pytest.approx(1100.0)
        assert parse_investment("£2bn").amount == pytest.approx(2.0)
        assert parse_investment("$750K").amount == pytest.approx(0.00075)

    def test_bare_number_has_no_currency(self):
        inv = parse_investment("3.2B")
        assert inv.amount == pytest.approx(3.2)
        assert inv.currency is None

    @pytest.mark.parametrize("raw", ["TBD", "", None, "not disclosed"])
    def test_no_number_is_unparsed(self, raw):
        inv = parse_investment(raw)
        assert not inv.parsed
        assert inv.amount is None
        assert inv.currency is None


class TestFormatInvestment:
    """Display strings for KPI cards."""

    def test_symbols(self):
        assert format_investment(8.0, "USD") == "$8.00B"
        assert format_investment(5.3, "EUR") == "€5.30B"

    def test_code_and_missing(self):
        assert format_investment(5.7, "SGD") == "SGD 5.70B"
        assert format_investment(None, "USD") == "N/A"
        assert format_investment(1.5, None) == "1.50B"
