# holdrank/export_json.py — One scored holding → one JSON line
import json


def _safe(v):
    if v is None:
        return None
    if isinstance(v, float):
        return None if (v != v or v in (float("inf"), float("-inf"))) else v
    if isinstance(v, dict):
        return {str(k): _safe(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_safe(x) for x in v]
    if isinstance(v, (str, int, bool)):
        return v
    try:
        return _safe(float(v))      # numpy scalars
    except (TypeError, ValueError):
        return str(v)


def serialize_row(row: dict) -> str:
    """Compact JSON for a result row; NaN/inf become null."""
    return json.dumps(_safe(row), ensure_ascii=False)
