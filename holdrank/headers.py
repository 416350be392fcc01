# holdrank/headers.py — Semantic header matching for uploaded sheets
import re
from holdrank.config import HEADER_FIELDS, INSTRUMENT_HEADER_PATTERNS
from holdrank.utils import normalize_string


def match_header(cell_text, patterns) -> bool:
    """True when any regex in ``patterns`` matches the trimmed, lower-cased cell."""
    value = normalize_string(cell_text)
    for pattern in patterns:
        if re.search(pattern, value):
            return True
    return False


def is_instrument_header(row) -> bool:
    return any(match_header(cell, INSTRUMENT_HEADER_PATTERNS) for cell in row or [])


def map_header_row(row, fields=HEADER_FIELDS) -> dict:
    """Map semantic field → column index for one header row.

    Each column goes to the first field whose patterns match it; columns
    matching nothing are ignored. When two columns map to the same field
    the right-most one wins.
    """
    header_map = {}
    for idx, cell in enumerate(row or []):
        for field, patterns in fields:
            if match_header(cell, patterns):
                header_map[field] = idx
                break
    return header_map
