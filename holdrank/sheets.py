# holdrank/sheets.py — Uploaded workbooks → rectangular cell grids
import logging
import pandas as pd

logger = logging.getLogger(__name__)


def _trim_row(row) -> list:
    cells = ["" if pd.isna(c) else str(c) for c in row]
    while cells and not cells[-1].strip():
        cells.pop()
    return cells


def read_grids(source) -> list:
    """[(sheet name, grid)] for every sheet of an .xlsx path or file object.

    Cells are kept as text; trailing blank cells are dropped so a blank row
    becomes an empty list.
    """
    sheets = pd.read_excel(source, sheet_name=None, header=None, dtype=str,
                           engine="openpyxl")
    grids = []
    for name, df in sheets.items():
        grid = [_trim_row(r) for r in df.itertuples(index=False, name=None)]
        grids.append((name, grid))
    return grids
