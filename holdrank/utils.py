# holdrank/utils.py — Total conversions over loosely-typed record documents
import logging
import re

logger = logging.getLogger(__name__)

NBSP = "\u00a0"
_WS = re.compile(r"[ \t\r\n\f\v]+")


def parse_number(val):
    """Parse a raw document value to float, or None when it is not numeric.

    Thousands separators are dropped and a percent sign divides by 100, so
    "1,234.5%" parses to 12.345.
    """
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        f = float(val)
        return None if f != f else f
    if not isinstance(val, str):
        return None
    s = val.replace(",", "").strip()
    pct = "%" in s
    if pct:
        s = s.replace("%", "").strip()
    try:
        f = float(s)
    except ValueError:
        logger.debug("not a number: %r", val)
        return None
    if f != f:
        return None
    return f / 100.0 if pct else f


def to_float(val, default: float = 0.0) -> float:
    f = parse_number(val)
    return default if f is None else f


def to_string_array(val) -> list:
    """Keep the string members of a list value; anything else is empty."""
    if not isinstance(val, (list, tuple)):
        return []
    return [v for v in val if isinstance(v, str)]


def normalize_string(s) -> str:
    return str(s or "").strip().lower()


def normalize_label(label) -> str:
    """Row label as stored: trimmed, whitespace runs collapsed, and a
    trailing "+" bound to the word before it with a non-breaking space,
    which is how the scraped statements spell expandable rows."""
    s = _WS.sub(" ", str(label or "")).strip()
    if "+" in s:
        s = s.replace(" +", NBSP + "+")
    return s


def get_nested(doc, *path, default=None):
    cur = doc
    for key in path:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(key)
        if cur is None:
            return default
    return cur


def get_nested_array(doc, *path) -> list:
    """List stored at ``path`` inside ``doc``, or [] when missing or not a list.

    Keys are matched exactly: "Sales +" with a plain space does not find the
    stored "Sales\u00a0+" row, so callers pass labels in stored form.
    """
    if not path:
        return []
    val = get_nested(doc, *path)
    return list(val) if isinstance(val, (list, tuple)) else []
