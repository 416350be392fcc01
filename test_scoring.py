"""
Unit tests for the holdings scorers.
Tests conversions, peer / trend / F-Score algorithms and the rating blend.
Run: python -m pytest test_scoring.py -v
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(__file__))

from holdrank.composite import rate_stock, score_record
from holdrank.config import CFG
from holdrank.metrics import (
    generate_f_score,
    increase_in_roa,
    leverage_score,
    operating_efficiency_score,
    profitability_score,
)
from holdrank.peers import peer_score, stock_fields
from holdrank.resolver import market_cap_category
from holdrank.trend import trend_score
from holdrank.utils import get_nested_array, normalize_label, parse_number, to_float, to_string_array

NB = "\u00a0"


# ═══════════════════════════════════════════════════
#  HELPERS: mock records
# ═══════════════════════════════════════════════════

def series(**labels):
    """TimeSeries section with labels normalized the way the extractor stores them."""
    return {normalize_label(k.replace("_", " ")): v for k, v in labels.items()}


def make_record(**kwargs):
    """A healthy company: every F-Score check passes."""
    defaults = {
        "name": "Test Industries Ltd",
        "stockPE": "12",
        "marketCap": "1,000",
        "dividendYield": "1.0",
        "roce": "15",
        "quarterlyResults": {
            f"Sales{NB}+":      ["100", "120"],
            f"Net Profit{NB}+": ["10", "12"],
        },
        "profitLoss": {
            f"Net Profit{NB}+": ["80", "100", "120"],     # last column is TTM
            "OPM %":            ["15%", "18%", "19%"],
            f"Sales{NB}+":      ["1,000", "1,200", "1,300"],
        },
        "balanceSheet": {
            "Total Assets":              ["1,000", "1,100"],
            f"Borrowings{NB}+":          ["300", "250"],
            f"Other Assets{NB}+":        ["400", "500"],
            f"Other Liabilities{NB}+":   ["300", "300"],
            "Equity Capital":            ["50", "50"],
        },
        "cashFlows": {
            f"Cash from Operating Activity{NB}+": ["90", "130"],
        },
    }
    defaults.update(kwargs)
    return defaults


PEERS = [
    {"name": "Peer A", "pe": "10", "market_cap": "900",   "div_yield": "0.5",
     "roce": "20", "sales_qtr": "150", "np_qtr": "11"},
    {"name": "Peer B", "pe": "20", "market_cap": "2,000", "div_yield": "1.5",
     "roce": "10", "sales_qtr": "100", "np_qtr": "15"},
    {"name": "Median", "pe": "15", "market_cap": "1,500", "div_yield": "1.0",
     "roce": "15", "sales_qtr": "125", "np_qtr": "13"},
]


# ═══════════════════════════════════════════════════
#  TEST: conversions
# ═══════════════════════════════════════════════════

class TestConversions:
    def test_percent_with_separator(self):
        assert to_float("1,234.5%") == pytest.approx(12.345)

    def test_thousands_separator(self):
        assert to_float("1,234.5") == 1234.5

    def test_indian_grouping(self):
        assert to_float("1,23,456") == 123456.0

    def test_non_numeric_returns_zero(self):
        assert to_float("n/a") == 0.0
        assert to_float("") == 0.0

    def test_non_string_values(self):
        assert to_float(None) == 0.0
        assert to_float(7) == 7.0
        assert to_float({"a": 1}) == 0.0
        assert to_float(True) == 0.0

    def test_parse_number_distinguishes_missing(self):
        assert parse_number("abc") is None
        assert parse_number("0") == 0.0

    def test_string_array_keeps_strings_only(self):
        assert to_string_array(["good", 3, None, "bad"]) == ["good", "bad"]
        assert to_string_array("not a list") == []

    def test_nested_array_matches_stored_labels_exactly(self):
        rec = {"profitLoss": {f"Sales{NB}+": ["1", "2"]}}
        assert get_nested_array(rec, "profitLoss", f"Sales{NB}+") == ["1", "2"]
        assert get_nested_array(rec, "profitLoss", "Sales +") == []
        assert get_nested_array(rec, "profitLoss", "Missing") == []
        assert get_nested_array(rec, "nothing", f"Sales{NB}+") == []


# ═══════════════════════════════════════════════════
#  TEST: market-cap category
# ═══════════════════════════════════════════════════

class TestMarketCap:
    @pytest.mark.parametrize("value,expected", [
        ("20000", "Large Cap"),
        ("1,50,000", "Large Cap"),
        ("19999.99", "Mid Cap"),
        ("5000", "Mid Cap"),
        ("4999.99", "Small Cap"),
        ("0", "Small Cap"),
        ("", "Unknown Category"),
        (None, "Unknown Category"),
        ("n/a", "Unknown Category"),
    ])
    def test_thresholds(self, value, expected):
        assert market_cap_category(value) == expected


# ═══════════════════════════════════════════════════
#  TEST: peer comparison
# ═══════════════════════════════════════════════════

class TestPeerScore:
    def test_fewer_than_two_entries_scores_zero(self):
        rec = make_record()
        assert peer_score(rec, []) == 0.0
        assert peer_score(rec, PEERS[-1:]) == 0.0
        assert peer_score(rec, None) == 0.0

    def test_hand_computed_total(self):
        # Peer A: PE 8 (decayed) + mcap 5 + yield 5 + profit 10      = 28
        # Peer B: PE 10 + ROCE 10 + sales 5                          = 25
        # Median: PE 5                                               = 5
        # (28 + 25 + 5) / 2 peers
        assert peer_score(make_record(), PEERS) == pytest.approx(29.0)

    def test_median_points_are_not_divided_separately(self):
        rec = make_record(stockPE="5", marketCap="0", dividendYield="0",
                          roce="0", quarterlyResults={})
        peers = [{"pe": "10"}, {"pe": "10"}]
        # 10 vs the peer, 5 vs the median, single peer
        assert peer_score(rec, peers) == pytest.approx(15.0)

    def test_decaying_pe_credit_never_negative(self):
        rec = make_record(stockPE="50", marketCap="0", dividendYield="0",
                          roce="0", quarterlyResults={})
        assert peer_score(rec, [{"pe": "10"}, {"pe": "10"}]) == 0.0

    def test_unparsable_peer_fields_default_to_zero(self):
        rec = make_record(stockPE="-1", marketCap="0", dividendYield="0",
                          roce="0", quarterlyResults={})
        peers = [{"pe": "--", "market_cap": "x"}, "garbage"]
        # PE -1 < 0 on both entries; nothing else is strictly higher
        assert peer_score(rec, peers) == pytest.approx(15.0)

    def test_target_quarterly_figures_from_latest_quarter(self):
        fields = stock_fields(make_record())
        assert fields["quarterlySales"] == 120.0
        assert fields["quarterlyProfit"] == 12.0


# ═══════════════════════════════════════════════════
#  TEST: trend
# ═══════════════════════════════════════════════════

class TestTrend:
    def test_no_adjacent_values_scores_zero(self):
        assert trend_score({}, None) == 0.0
        assert trend_score({}, [series(Sales_x=["10"])]) == 0.0
        assert trend_score({"quarterlyResults": {}}) == 0.0

    def test_consistent_rise(self):
        assert trend_score({}, [series(Sales=["1", "2", "3"])]) == 5.0

    def test_mixed_directions_average_over_comparisons(self):
        sec = series(Sales=["1", "2", "3"], Profit=["5", "4"])
        assert trend_score({}, [sec]) == pytest.approx(5 / 3)

    def test_equal_and_missing_are_not_counted(self):
        sec = series(Sales=["4", "4"], Profit=["10", "", "12"], OPM=["1%", "2%"])
        assert trend_score({}, [sec]) == 5.0

    def test_separators_parsed(self):
        assert trend_score({}, [series(Sales=["1,200", "1,100"])]) == -5.0

    def test_order_independent_across_labels_and_sections(self):
        a = {"Sales": ["1", "2"], "Profit": ["3", "1"], "EPS": ["1", "2", "3"]}
        b = {"Expenses": ["9", "8"]}
        forward = trend_score({}, [a, b])
        reversed_labels = {k: a[k] for k in reversed(list(a))}
        backward = trend_score({}, [b, reversed_labels])
        assert forward == pytest.approx(backward)
        # +5 -5 +5 +5 -5 over five comparisons
        assert forward == pytest.approx(1.0)

    def test_period_keyed_entries(self):
        sec = {"Results": [{"Sales": "1", "Profit": "5"},
                           {"Sales": "2", "Profit": "4"},
                           {"Sales": "3"}]}
        # +5, -5, +5 (Profit absent from the last period)
        assert trend_score({}, [sec]) == pytest.approx(5 / 3)

    def test_defaults_to_quarterly_results(self):
        assert trend_score(make_record()) == 5.0


# ═══════════════════════════════════════════════════
#  TEST: F-Score
# ═══════════════════════════════════════════════════

class TestFScore:
    def test_healthy_company_scores_nine(self):
        rec = make_record()
        assert profitability_score(rec) == 4
        assert leverage_score(rec) == 3
        assert operating_efficiency_score(rec) == 2
        assert generate_f_score(rec) == 9

    def test_distressed_company_scores_low(self):
        rec = make_record(
            profitLoss={
                f"Net Profit{NB}+": ["100", "-20", "-10"],
                "OPM %":            ["20%", "12%", "10%"],
                f"Sales{NB}+":      ["1,200", "900", "800"],
            },
            balanceSheet={
                "Total Assets":            ["1,000", "1,100"],
                f"Borrowings{NB}+":        ["100", "400"],
                f"Other Assets{NB}+":      ["500", "300"],
                f"Other Liabilities{NB}+": ["300", "300"],
                "Equity Capital":          ["50", "80"],
            },
            cashFlows={f"Cash from Operating Activity{NB}+": ["90", "-40"]},
        )
        assert generate_f_score(rec) == 0

    def test_missing_data_scores_zero(self):
        assert generate_f_score({}) == 0
        assert generate_f_score({"profitLoss": "corrupt", "balanceSheet": None}) == 0

    def test_short_history_contributes_nothing(self):
        rec = {
            "profitLoss":   {f"Net Profit{NB}+": ["5"], "OPM %": ["1%", "2%"]},
            "balanceSheet": {"Total Assets": ["10"], "Equity Capital": ["1"]},
            "cashFlows":    {f"Cash from Operating Activity{NB}+": ["3"]},
        }
        assert profitability_score(rec) == 0
        assert leverage_score(rec) == 0
        assert operating_efficiency_score(rec) == 0

    def test_zero_denominators_do_not_raise(self):
        rec = make_record()
        rec["balanceSheet"] = dict(rec["balanceSheet"], **{"Total Assets": ["0", "0"]})
        score = generate_f_score(rec)
        assert 0 <= score <= 9
        assert not increase_in_roa([1, 2, 3], ["0", "0"])

    def test_unparsable_equity_capital_scores_nothing(self):
        assert leverage_score({"balanceSheet": {"Equity Capital": ["--", "--"]}}) == 0
        assert leverage_score({"balanceSheet": {"Equity Capital": ["50", "n/a"]}}) == 0
        assert leverage_score({"balanceSheet": {"Equity Capital": ["50", "50"]}}) == 1

    def test_sub_score_ranges(self):
        for rec in (make_record(), {}, make_record(cashFlows={})):
            assert 0 <= profitability_score(rec) <= 4
            assert 0 <= leverage_score(rec) <= 3
            assert 0 <= operating_efficiency_score(rec) <= 2
            assert isinstance(generate_f_score(rec), int)


# ═══════════════════════════════════════════════════
#  TEST: rating blend
# ═══════════════════════════════════════════════════

class TestRating:
    def test_blend_of_peer_and_trend(self):
        rec = make_record(peers=PEERS)
        # 29.0 * 0.5 + 5.0 * 0.4
        assert rate_stock(rec) == pytest.approx(16.5)

    def test_rounded_to_two_places(self):
        rec = make_record(peers=PEERS, quarterlyResults={
            f"Sales{NB}+":      ["100", "110", "120"],
            f"Net Profit{NB}+": ["13", "12"],
        })
        # 29.0 * 0.5 + (5/3) * 0.4 = 15.1666…
        assert rate_stock(rec) == 15.17

    def test_no_peers_no_history(self):
        assert rate_stock({"name": "Empty"}) == 0.0

    def test_score_record_fields(self):
        out = score_record(make_record(peers=PEERS))
        assert out == {"stockRate": 16.5, "f_score": 9}

    def test_weights(self):
        assert CFG["weights"] == {"peer": 0.5, "trend": 0.4}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
