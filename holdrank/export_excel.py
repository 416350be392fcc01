# holdrank/export_excel.py — Excel workbook of scored holdings
import sys
import pandas as pd
from openpyxl.formatting.rule import ColorScaleRule
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from holdrank.config import EXPORT_COLS, FRIENDLY_NAMES

NAVY  = PatternFill("solid", fgColor="1F3864")
TEAL  = PatternFill("solid", fgColor="0E6655")
BAND  = PatternFill("solid", fgColor="F2F6FA")
THIN  = Side(style="thin", color="C9CED6")
GRID  = Border(bottom=THIN, right=THIN)

SCORE_HEADERS = {"Cap Category", "Market Cap (₹ Cr)", "Stock Rate", "F-Score (0-9)", "Match Score"}


def _scale(header: str):
    # F-Score has a fixed 0..9 range, Stock Rate is relative to the batch
    if header == "F-Score (0-9)":
        return ColorScaleRule(start_type="num", start_value=0, start_color="F8696B",
                              mid_type="num", mid_value=4.5, mid_color="FFEB84",
                              end_type="num", end_value=9, end_color="63BE7B")
    return ColorScaleRule(start_type="min", start_color="F8696B",
                          mid_type="percentile", mid_value=50, mid_color="FFEB84",
                          end_type="max", end_color="63BE7B")


def _holdings_frame(rows: list) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    out = df.reindex(columns=[c for c in EXPORT_COLS if c in df.columns])
    if "stockRate" in out.columns:
        out = out.sort_values("stockRate", ascending=False, kind="stable")
    return out.rename(columns=FRIENDLY_NAMES)


def _category_frame(rows: list) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    if df.empty or "marketCap" not in df.columns:
        return pd.DataFrame()
    stats = df.groupby("marketCap")[["stockRate", "f_score"]].agg(["count", "median", "mean", "max"])
    stats.columns = [f"{FRIENDLY_NAMES.get(m, m)} {agg}" for m, agg in stats.columns]
    stats.index.name = FRIENDLY_NAMES["marketCap"]
    return stats.round(2).reset_index()


def style_and_export(rows: list, filepath: str):
    holdings = _holdings_frame(rows)
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        holdings.to_excel(writer, sheet_name="Holdings", index=False)
        _category_frame(rows).to_excel(writer, sheet_name="By Category", index=False)
        holdings.head(25).to_excel(writer, sheet_name="Top 25", index=False)
        for ws in writer.book.worksheets:
            _format_sheet(ws)

    print(f"✅  Excel → {filepath}", file=sys.stderr)


def _format_sheet(ws):
    headers = {}
    for cell in ws[1]:
        name = str(cell.value or "")
        headers[name] = cell.column
        cell.fill      = TEAL if name in SCORE_HEADERS else NAVY
        cell.font      = Font(bold=True, color="FFFFFF", size=10)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        cell.border    = GRID
    ws.row_dimensions[1].height = 30

    link_col = headers.get(FRIENDLY_NAMES["url"])
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.border = GRID
            if cell.row % 2:
                cell.fill = BAND
            if cell.column == link_col and cell.value:
                cell.hyperlink = str(cell.value)
                cell.font = Font(color="0563C1", underline="single")

    for col in ws.iter_cols(min_row=1, max_row=ws.max_row):
        longest = max((len(str(c.value)) for c in col if c.value is not None), default=0)
        ws.column_dimensions[get_column_letter(col[0].column)].width = max(10, min(longest + 2, 45))

    if ws.max_row > 1:
        for name in ("Stock Rate", "F-Score (0-9)"):
            if name in headers:
                cl = get_column_letter(headers[name])
                ws.conditional_formatting.add(f"{cl}2:{cl}{ws.max_row}", _scale(name))
    ws.freeze_panes = "B2"
