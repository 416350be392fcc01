# holdrank/extract.py — Section extraction from cell grids and scraped pages
"""
Two families of extractors share the same row rules:

  grids: rows of cell text (spreadsheet sheets, HTML tables flattened by
         ``table_grid``). A header row is located first, empty rows are
         skipped, and a stop-marker row ends the section.
  pages: the company page and the peer table of the live source, parsed
         with BeautifulSoup into the canonical record layout.

TimeSeries sections map a normalized row label to its raw values, oldest
period first. Values stay raw strings; numeric parsing is left to each
scorer.
"""
from bs4 import BeautifulSoup
from holdrank.config import (CFG, HEADER_FIELDS, INSTRUMENT_HEADER_PATTERNS,
                             INSTRUMENT_NAME, NAME_ALIASES, PEER_COLUMNS,
                             SECTION_KEYS, TOP_RATIO_KEYS)
from holdrank.headers import map_header_row, match_header
from holdrank.utils import normalize_label


# ════════════════════════════════════════════════════════════
#  GRID HELPERS
# ════════════════════════════════════════════════════════════

def _cell(row, idx: int) -> str:
    if idx >= len(row) or row[idx] is None:
        return ""
    return str(row[idx]).strip()


def is_empty_row(row) -> bool:
    return not row or all(not str(c if c is not None else "").strip() for c in row)


def is_stop_row(row, markers) -> bool:
    joined = "".join(str(c) for c in row if c is not None).lower()
    return any(m in joined for m in markers)


def find_header_row(grid, patterns):
    """Index of the first row with a cell matching ``patterns``, else None."""
    for i, row in enumerate(grid):
        if is_empty_row(row):
            continue
        if any(match_header(c, patterns) for c in row):
            return i
    return None


# ════════════════════════════════════════════════════════════
#  GRID EXTRACTORS
# ════════════════════════════════════════════════════════════

def extract_time_series(grid, label_column: int = 0, header_patterns=None,
                        stop_markers=(), max_values=None) -> dict:
    """Build a TimeSeries section: label → [value per column right of the label].

    With ``header_patterns`` the rows up to and including the matching header
    row are skipped, and the header's period count caps each value list.
    A repeated label keeps the later row.
    """
    start = 0
    if header_patterns:
        hdr = find_header_row(grid, header_patterns)
        if hdr is None:
            return {}
        start = hdr + 1
        periods = len(grid[hdr]) - label_column - 1
        max_values = periods if max_values is None else min(max_values, periods)

    series = {}
    for row in grid[start:]:
        if is_empty_row(row):
            continue
        if stop_markers and is_stop_row(row, stop_markers):
            break
        label = normalize_label(_cell(row, label_column))
        if not label:
            continue
        values = [_cell(row, i) for i in range(label_column + 1, len(row))]
        if max_values is not None:
            values = values[:max_values]
        series[label] = values
    return series


def extract_table_records(grid, header_patterns=None, stop_markers=()) -> list:
    """Rows as dicts keyed by the header row's cell text.

    Without ``header_patterns`` the first non-empty row is the header.
    """
    if header_patterns:
        hdr = find_header_row(grid, header_patterns)
    else:
        hdr = next((i for i, r in enumerate(grid) if not is_empty_row(r)), None)
    if hdr is None:
        return []
    headers = [_cell(grid[hdr], i) for i in range(len(grid[hdr]))]

    records = []
    for row in grid[hdr + 1:]:
        if is_empty_row(row):
            continue
        if stop_markers and is_stop_row(row, stop_markers):
            break
        records.append({h: _cell(row, j) for j, h in enumerate(headers) if h})
    return records


def extract_holdings(grid, stop_markers=None) -> list:
    """Holding rows of one portfolio sheet, keyed by semantic field.

    The header row is the first row naming the instrument column; rows
    before it are ignored and the first subtotal/total row ends the sheet.
    Rows without an instrument name are dropped and known display-name
    aliases are applied.
    """
    if stop_markers is None:
        stop_markers = CFG["stop_markers"]
    hdr = find_header_row(grid, INSTRUMENT_HEADER_PATTERNS)
    if hdr is None:
        return []
    header_map = map_header_row(grid[hdr], HEADER_FIELDS)

    holdings = []
    for row in grid[hdr + 1:]:
        if is_empty_row(row):
            continue
        if is_stop_row(row, stop_markers):
            break
        detail = {field: _cell(row, idx) for field, idx in header_map.items()}
        name = detail.get(INSTRUMENT_NAME, "")
        if not name:
            continue
        detail[INSTRUMENT_NAME] = NAME_ALIASES.get(name, name)
        holdings.append(detail)
    return holdings


# ════════════════════════════════════════════════════════════
#  HTML → GRID
# ════════════════════════════════════════════════════════════

def _text(tag) -> str:
    # Whole-text strip keeps the non-breaking space inside "Sales +" labels
    return tag.get_text().strip() if tag is not None else ""


def table_grid(table):
    """(header cells, body rows) of an HTML table as plain text."""
    if table is None:
        return [], []
    headers = [_text(th) for th in table.select("thead th")]
    body = table.select("tbody tr")
    if not headers:
        first = table.find("tr")
        headers = [_text(th) for th in first.find_all("th")] if first else []
    if not body:
        body = [tr for tr in table.find_all("tr") if tr.find("td")]
    rows = [[_text(td) for td in tr.find_all("td")] for tr in body]
    return headers, rows


def parse_table_data(section, selector: str = "div[data-result-table]") -> dict:
    """TimeSeries section from a statement block (profit & loss, balance sheet...)."""
    if section is None:
        return {}
    holder = section.select_one(selector) if selector else section
    if holder is None:
        return {}
    table = holder if holder.name == "table" else holder.find("table")
    headers, rows = table_grid(table)
    periods = len(headers) - 1 if headers else None
    return extract_time_series(rows, label_column=0, max_values=periods)


def parse_shareholding(section) -> dict:
    """{"quarterly": [...], "yearly": [...]} of {category, values: period → raw}."""
    result = {}
    if section is None:
        return result
    for key, div_id in (("quarterly", "quarterly-shp"), ("yearly", "yearly-shp")):
        div = section.find(id=div_id)
        if div is None:
            continue
        headers, rows = table_grid(div.find("table"))
        periods = headers[1:]
        entries = []
        for row in rows:
            if is_empty_row(row):
                continue
            values = {p: row[i + 1] for i, p in enumerate(periods) if i + 1 < len(row)}
            entries.append({"category": normalize_label(row[0]), "values": values})
        if entries:
            result[key] = entries
    return result


# ════════════════════════════════════════════════════════════
#  COMPANY PAGE
# ════════════════════════════════════════════════════════════

def _clean_ratio(value: str) -> str:
    for junk in ("\n", " ", "₹", "Cr.", "%"):
        value = value.replace(junk, "")
    return value


def parse_top_ratios(soup) -> dict:
    ratios = {}
    for li in soup.select("li.flex.flex-space-between[data-source='default']"):
        label = _text(li.select_one("span.name"))
        value = _clean_ratio(_text(li.select_one("span.nowrap.value")))
        if label:
            ratios[TOP_RATIO_KEYS.get(label, label)] = value
    return ratios


def parse_company_page(html: str) -> dict:
    """Canonical record fields (minus name/url/peers) from a company page.

    The page's warehouse id, needed to fetch peers, is returned under
    ``_warehouse_id`` when present.
    """
    soup = BeautifulSoup(html, "html.parser")
    record = parse_top_ratios(soup)
    record["pros"] = [_text(li) for li in soup.select("div.pros ul li")]
    record["cons"] = [_text(li) for li in soup.select("div.cons ul li")]

    quarters = soup.select_one("section#quarters")
    if quarters is not None:
        record["quarterlyResults"] = parse_table_data(quarters, "table.data-table")
    else:
        record["quarterlyResults"] = parse_table_data(soup, "table.data-table")

    for section_id, key in SECTION_KEYS.items():
        section = soup.select_one(f"section#{section_id}")
        if section is not None:
            record[key] = parse_table_data(section)

    shp = soup.select_one("section#shareholding")
    if shp is not None:
        record["shareholdingPattern"] = parse_shareholding(shp)

    wh = soup.select_one("div[data-warehouse-id]")
    if wh is not None and wh.get("data-warehouse-id"):
        record["_warehouse_id"] = wh["data-warehouse-id"]
    return record


# ════════════════════════════════════════════════════════════
#  PEER TABLE
# ════════════════════════════════════════════════════════════

def _peer_row(cells, name: str) -> dict:
    row = {"name": name}
    for idx, key in PEER_COLUMNS.items():
        row[key] = _text(cells[idx]) if idx < len(cells) else ""
    return row


def parse_peers(html: str):
    """(peers, peers_table) from the peer comparison fragment.

    ``peers`` holds one entry per peer company with the footer median row
    appended last; an empty median is appended when the footer is missing
    so the last entry is always the aggregate. ``peers_table`` is the same
    table keyed by its own column headers.
    """
    soup = BeautifulSoup(html, "html.parser")
    peers = []
    for tr in soup.select("tr[data-row-company-id]"):
        cells = tr.find_all("td")
        peers.append(_peer_row(cells, _text(tr.select_one("td.text a"))))

    median = {}
    for tr in soup.select("tfoot tr"):
        cells = tr.find_all("td")
        median = _peer_row(cells, "Median")
        median["company_count"] = _text(cells[1]) if len(cells) > 1 else ""
    peers.append(median)

    headers, rows = table_grid(soup.find("table"))
    peers_table = extract_table_records([headers] + rows) if headers else []
    return peers, peers_table
