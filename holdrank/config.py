# holdrank/config.py — Configuration, thresholds, patterns, constants
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent / ".env")

# ════════════════════════════════════════════════════════════
#  CONFIGURATION
# ════════════════════════════════════════════════════════════
CFG = {
    "weights": {
        "peer":  0.5,
        "trend": 0.4,
    },
    "relevance_threshold": 1.0,      # store text score at/above which the cached record is trusted
    "large_cap_min":       20000,    # ₹ crore
    "mid_cap_min":         5000,
    "http_timeout":        10,
    "sleep_peers":         1.0,
    "stop_markers":        ("subtotal", "total"),
    "company_url":         os.getenv("COMPANY_URL", "https://www.screener.in"),
    "mongo_uri":           os.getenv("MONGO_URI", ""),
    "database":            os.getenv("DATABASE", "stocks"),
    "collection":          os.getenv("COLLECTION", "companies"),
    "store_file":          os.getenv("HOLDRANK_STORE", "holdrank_store.pkl"),
    "log_level":           os.getenv("HOLDRANK_LOG_LEVEL", "INFO"),
}
assert abs(sum(CFG["weights"].values()) - 0.9) < 1e-6, "Rating weights must sum to 0.9"

STREAM_COMPLETE = "\nStream complete.\n"

# ════════════════════════════════════════════════════════════
#  SPREADSHEET HEADERS
# ════════════════════════════════════════════════════════════
INSTRUMENT_NAME = "Name of the Instrument"

INSTRUMENT_HEADER_PATTERNS = [r"name\s*of\s*(the)?\s*instrument"]

# Order matters: a column is mapped to the first field whose patterns match.
HEADER_FIELDS = [
    (INSTRUMENT_NAME,     INSTRUMENT_HEADER_PATTERNS),
    ("ISIN",              [r"isin"]),
    ("Industry/Rating",   [r"rating\s*/\s*industry", r"industry\s*/\s*rating"]),
    ("Quantity",          [r"quantity"]),
    ("Market/Fair Value", [r"market\s*/\s*fair\s*value.*", r"market\s*value.*"]),
    ("Percentage of AUM", [r"%.*nav", r"%.*net\s*assets"]),
]

# Fund factsheets spell some holdings differently from the screener listing
NAME_ALIASES = {
    "Sun Pharmaceutical Industries Limited":       "Sun Pharma.Inds.",
    "KEC International Limited":                   "K E C Intl.",
    "Sandhar Technologies Limited":                "Sandhar Tech",
    "Samvardhana Motherson International Limited": "Samvardh. Mothe.",
    "Coromandel International Limited":            "Coromandel Inter",
}

QUERY_SUBSTITUTIONS = [
    (r"\bcorporation\b", "Corpn"),
    (r"\blimited\b",     "Ltd"),
    (r"\band\b",         "&"),
]

# ════════════════════════════════════════════════════════════
#  LIVE SOURCE
# ════════════════════════════════════════════════════════════
HTTP_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}

SEARCH_PATH = "/api/company/search/"
PEERS_PATH  = "/api/company/{warehouse_id}/peers/"

# Top-ratio label on the company page → canonical record key
TOP_RATIO_KEYS = {
    "Market Cap":     "marketCap",
    "Current Price":  "currentPrice",
    "High / Low":     "highLow",
    "Stock P/E":      "stockPE",
    "Book Value":     "bookValue",
    "Dividend Yield": "dividendYield",
    "ROCE":           "roce",
    "ROE":            "roe",
    "Face Value":     "faceValue",
}

# Company page section id → canonical record key
SECTION_KEYS = {
    "profit-loss":   "profitLoss",
    "balance-sheet": "balanceSheet",
    "ratios":        "ratios",
    "cash-flow":     "cashFlows",
}

# Peer table column index → peer record key (column 0 is the serial, 1 the name)
PEER_COLUMNS = {
    2:  "current_price",
    3:  "pe",
    4:  "market_cap",
    5:  "div_yield",
    6:  "np_qtr",
    7:  "qtr_profit_var",
    8:  "sales_qtr",
    9:  "qtr_sales_var",
    10: "roce",
}

# ════════════════════════════════════════════════════════════
#  SCORING
# ════════════════════════════════════════════════════════════
# Peer comparison: record key, peer key, per-peer points, median points, lower-is-better
PEER_CHECKS = [
    ("pe",              "pe",         10, 5, True),
    ("marketCap",       "market_cap",  5, 3, False),
    ("dividendYield",   "div_yield",   5, 3, False),
    ("roce",            "roce",       10, 5, False),
    ("quarterlySales",  "sales_qtr",   5, 2, False),
    ("quarterlyProfit", "np_qtr",     10, 5, False),
]

TREND_SECTIONS = ("quarterlyResults",)

# Statement row labels exactly as stored; expandable rows bind "+" with a
# non-breaking space
SALES             = "Sales\u00a0+"
NET_PROFIT        = "Net Profit\u00a0+"
OPERATING_CASH    = "Cash from Operating Activity\u00a0+"
BORROWINGS        = "Borrowings\u00a0+"
OTHER_ASSETS      = "Other Assets\u00a0+"
OTHER_LIABILITIES = "Other Liabilities\u00a0+"
TOTAL_ASSETS      = "Total Assets"
EQUITY_CAPITAL    = "Equity Capital"
OPM               = "OPM %"

# ════════════════════════════════════════════════════════════
#  EXPORT
# ════════════════════════════════════════════════════════════
EXPORT_COLS = [
    INSTRUMENT_NAME, "resolvedName", "ISIN", "Industry/Rating", "Quantity",
    "Market/Fair Value", "Percentage of AUM",
    "marketCap", "marketCapValue", "stockRate", "f_score", "matchScore", "url",
]

FRIENDLY_NAMES = {
    INSTRUMENT_NAME:     "Instrument",
    "resolvedName":      "Matched Company",
    "marketCap":         "Cap Category",
    "marketCapValue":    "Market Cap (₹ Cr)",
    "stockRate":         "Stock Rate",
    "f_score":           "F-Score (0-9)",
    "matchScore":        "Match Score",
    "url":               "Source",
}
