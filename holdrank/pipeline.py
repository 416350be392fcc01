# holdrank/pipeline.py — Batch orchestration: sheets → holdings → scored rows
import logging
import sys
import zipfile
from openpyxl.utils.exceptions import InvalidFileException
from holdrank.composite import score_record
from holdrank.config import INSTRUMENT_NAME, STREAM_COMPLETE
from holdrank.export_json import serialize_row
from holdrank.extract import extract_holdings
from holdrank.resolver import ResolutionError, market_cap_category
from holdrank.sheets import read_grids

logger = logging.getLogger(__name__)


def process_holding(detail: dict, resolver) -> dict:
    """Resolve one holding and attach its category and scores."""
    record, relevance = resolver.resolve(detail[INSTRUMENT_NAME])
    row = dict(detail)
    row["marketCapValue"] = record.get("marketCap")
    row["url"]            = record.get("url")
    row["marketCap"]      = market_cap_category(record.get("marketCap"))
    row.update(score_record(record))
    row["resolvedName"]   = record.get("name")
    row["matchScore"]     = round(relevance, 4)
    return row


def iter_results(grids, resolver):
    """Scored rows in sheet order; holdings that fail to resolve are skipped."""
    for sheet, grid in grids:
        holdings = extract_holdings(grid)
        logger.info("Processing sheet %s: %d holdings", sheet, len(holdings))
        for detail in holdings:
            try:
                yield process_holding(detail, resolver)
            except ResolutionError as e:
                logger.error("Skipping %s: %s", detail[INSTRUMENT_NAME], e)


def stream_results(grids, resolver, rows=None):
    """Newline-delimited JSON lines, then the completion marker.

    Scored rows are also appended to ``rows`` when a list is given.
    """
    for row in iter_results(grids, resolver):
        if rows is not None:
            rows.append(row)
        yield serialize_row(row) + "\n"
    yield STREAM_COMPLETE


def iter_workbooks(sources):
    for src in sources:
        try:
            yield from read_grids(src)
        except (OSError, ValueError, KeyError, zipfile.BadZipFile, InvalidFileException) as e:
            # KeyError: a zip archive missing the workbook parts
            logger.error("Error parsing workbook %s: %s", src, e)


def run_pipeline(sources, resolver, out=None) -> list:
    """Stream scored rows for every workbook to ``out``, flushing per row.

    Returns the rows written so callers can summarize or export them.
    """
    out = out or sys.stdout
    rows = []
    for chunk in stream_results(iter_workbooks(sources), resolver, rows):
        out.write(chunk)
        out.flush()
    return rows
