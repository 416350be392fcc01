# holdrank/composite.py — Stock rating blend
import math
from holdrank.config import CFG
from holdrank.metrics import generate_f_score
from holdrank.peers import peer_score
from holdrank.trend import trend_score


def _round2(x: float) -> float:
    # half away from zero
    return math.copysign(math.floor(abs(x) * 100 + 0.5), x) / 100


def rate_stock(record: dict, weights: dict = None) -> float:
    weights = weights or CFG["weights"]
    score = (peer_score(record, record.get("peers")) * weights["peer"]
             + trend_score(record) * weights["trend"])
    return _round2(score)


def score_record(record: dict) -> dict:
    return {
        "stockRate": rate_stock(record),
        "f_score":   generate_f_score(record),
    }
