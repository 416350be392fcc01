# holdrank/metrics.py — Piotroski-style F-Score from statement history
from holdrank.config import (BORROWINGS, EQUITY_CAPITAL, NET_PROFIT, OPERATING_CASH, OPM,
                             OTHER_ASSETS, OTHER_LIABILITIES, SALES, TOTAL_ASSETS)
from holdrank.utils import get_nested_array, parse_number, to_float


def _ratio(num, den):
    d = to_float(den)
    return None if d == 0 else to_float(num) / d


def _gt(a, b) -> bool:
    return a is not None and b is not None and a > b


def calculate_roa(net_profit, total_assets):
    return _ratio(net_profit, total_assets)


def increase_in_roa(net_profit: list, total_assets: list) -> bool:
    # Net profit carries a trailing TTM column the balance sheet does not
    if len(net_profit) < 3 or len(total_assets) < 2:
        return False
    current  = calculate_roa(net_profit[-2], total_assets[-1])
    previous = calculate_roa(net_profit[-3], total_assets[-2])
    return _gt(current, previous)


def profitability_score(record: dict) -> int:
    """
    F1 ROA positive (last full year)
    F2 Operating cash flow up year on year
    F3 ROA up year on year
    F4 Operating cash flow above net profit
    """
    score = 0
    net_profit   = get_nested_array(record, "profitLoss", NET_PROFIT)
    total_assets = get_nested_array(record, "balanceSheet", TOTAL_ASSETS)
    cfo          = get_nested_array(record, "cashFlows", OPERATING_CASH)

    if len(net_profit) > 1 and total_assets:
        roa = calculate_roa(net_profit[-2], total_assets[-1])
        if roa is not None and roa > 0:
            score += 1

    if len(cfo) > 1 and to_float(cfo[-1]) > to_float(cfo[-2]):
        score += 1

    if increase_in_roa(net_profit, total_assets):
        score += 1

    if cfo and len(net_profit) > 1 and to_float(cfo[-1]) > to_float(net_profit[-2]):
        score += 1

    return score


def leverage_score(record: dict) -> int:
    """
    F5 Borrowings / total assets not higher than last year
    F6 Other assets / other liabilities higher than last year
    F7 Equity capital not higher than last year (no new shares)
    """
    score = 0
    borrowings   = get_nested_array(record, "balanceSheet", BORROWINGS)
    total_assets = get_nested_array(record, "balanceSheet", TOTAL_ASSETS)
    if len(borrowings) > 1 and len(total_assets) > 1:
        current  = _ratio(borrowings[-1], total_assets[-1])
        previous = _ratio(borrowings[-2], total_assets[-2])
        if current is not None and previous is not None and current <= previous:
            score += 1

    other_assets = get_nested_array(record, "balanceSheet", OTHER_ASSETS)
    other_liabs  = get_nested_array(record, "balanceSheet", OTHER_LIABILITIES)
    if len(other_assets) > 1 and len(other_liabs) > 1:
        if _gt(_ratio(other_assets[-1], other_liabs[-1]),
               _ratio(other_assets[-2], other_liabs[-2])):
            score += 1

    equity = get_nested_array(record, "balanceSheet", EQUITY_CAPITAL)
    if len(equity) > 1:
        current  = parse_number(equity[-1])
        previous = parse_number(equity[-2])
        if current is not None and previous is not None and current <= previous:
            score += 1

    return score


def operating_efficiency_score(record: dict) -> int:
    """
    F8 Operating margin up year on year (TTM excluded)
    F9 Asset turnover up year on year (TTM sales excluded)
    """
    score = 0
    opm = get_nested_array(record, "profitLoss", OPM)
    if len(opm) > 2 and to_float(opm[-2]) > to_float(opm[-3]):
        score += 1

    sales        = get_nested_array(record, "profitLoss", SALES)
    total_assets = get_nested_array(record, "balanceSheet", TOTAL_ASSETS)
    if len(sales) > 2 and len(total_assets) > 1:
        if _gt(_ratio(sales[-2], total_assets[-1]),
               _ratio(sales[-3], total_assets[-2])):
            score += 1

    return score


def generate_f_score(record: dict) -> int:
    return (profitability_score(record)
            + leverage_score(record)
            + operating_efficiency_score(record))
