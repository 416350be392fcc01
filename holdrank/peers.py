# holdrank/peers.py — Peer comparison score
import logging
from holdrank.config import NET_PROFIT, PEER_CHECKS, SALES
from holdrank.utils import get_nested_array, to_float

logger = logging.getLogger(__name__)


def _latest(record: dict, label: str) -> float:
    values = get_nested_array(record, "quarterlyResults", label)
    return to_float(values[-1]) if values else 0.0


def stock_fields(record: dict) -> dict:
    """Numeric view of the fields the peer comparison looks at.

    Quarterly sales and net profit are the last values of the record's own
    quarterlyResults rows, so scores from tools that leave them at zero
    differ on those two checks.
    """
    return {
        "pe":              to_float(record.get("stockPE")),
        "marketCap":       to_float(record.get("marketCap")),
        "dividendYield":   to_float(record.get("dividendYield")),
        "roce":            to_float(record.get("roce")),
        "quarterlySales":  _latest(record, SALES),
        "quarterlyProfit": _latest(record, NET_PROFIT),
    }


def _points(stock: dict, other, median: bool) -> float:
    if not isinstance(other, dict):
        other = {}
    pts = 0.0
    for stock_key, peer_key, peer_pts, median_pts, lower_is_better in PEER_CHECKS:
        full = median_pts if median else peer_pts
        mine, theirs = stock[stock_key], to_float(other.get(peer_key))
        if lower_is_better:
            # Strictly lower earns full credit; otherwise credit decays with the gap
            pts += full if mine < theirs else max(0.0, full - (mine - theirs))
        elif mine > theirs:
            pts += full
    return pts


def peer_score(record: dict, peers) -> float:
    """Average points per peer, the last entry of ``peers`` being the median row.

    Points earned against the median are added to the peer total before it is
    divided by the number of real peers. Fewer than two entries score 0.
    """
    if not isinstance(peers, (list, tuple)) or len(peers) < 2:
        logger.debug("Not enough peers to compare for %s", record.get("name"))
        return 0.0
    stock = stock_fields(record)
    score = sum(_points(stock, p, median=False) for p in peers[:-1])
    score += _points(stock, peers[-1], median=True)
    return score / (len(peers) - 1)
