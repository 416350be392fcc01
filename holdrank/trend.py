# holdrank/trend.py — Multi-period trend score
from holdrank.config import TREND_SECTIONS
from holdrank.utils import parse_number


def _compare(cur, prev):
    """+5 / -5 for a rise / fall, None when equal or either side is missing."""
    a, b = parse_number(cur), parse_number(prev)
    if a is None or b is None or a == b:
        return None
    return 5.0 if a > b else -5.0


def _sequence_steps(values) -> list:
    steps = []
    for prev, cur in zip(values, values[1:]):
        if isinstance(prev, dict) and isinstance(cur, dict):
            # period-keyed entries: compare the keys both periods carry
            pairs = [(cur[k], prev[k]) for k in cur if k in prev]
        else:
            pairs = [(cur, prev)]
        for c, p in pairs:
            step = _compare(c, p)
            if step is not None:
                steps.append(step)
    return steps


def trend_score(record: dict, period_groups=None) -> float:
    """Mean of the per-step scores over every label of every section.

    ``period_groups`` is a list of TimeSeries sections (label → values,
    oldest first); by default the record's quarterly results. Only the order
    inside one label's sequence matters.
    """
    if period_groups is None:
        period_groups = [record.get(key) for key in TREND_SECTIONS]
    elif isinstance(period_groups, dict):
        period_groups = [period_groups]

    steps = []
    for section in period_groups:
        if not isinstance(section, dict):
            continue
        for values in section.values():
            if isinstance(values, (list, tuple)):
                steps.extend(_sequence_steps(list(values)))
    return sum(steps) / len(steps) if steps else 0.0
