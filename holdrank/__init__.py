# holdrank/__init__.py — Portfolio holdings scorer
#
# Turns fund portfolio disclosures (one workbook per fund) into a stream of
# scored holdings: each instrument is matched against a store of company
# records, refreshed from the live company directory when the match is weak,
# and rated on peers, quarterly trend and an F-Score.
#
# Module layout:
#   config.py        — CFG, header patterns, aliases, constants
#   utils.py         — to_float(), get_nested_array() and other total conversions
#   headers.py       — Header matching for uploaded sheets
#   extract.py       — Grid and HTML section extraction
#   data_screener.py — Live company directory client
#   store.py         — FileStore (pickle) / MongoStore
#   resolver.py      — Name → canonical record, market-cap category
#   peers.py         — Peer comparison score
#   trend.py         — Quarterly trend score
#   metrics.py       — F-Score
#   composite.py     — Stock rating blend
#   sheets.py        — Workbook → grids
#   pipeline.py      — Main orchestration (run_pipeline)
#   export_json.py   — Row serialization
#   export_excel.py  — Excel export + formatting
#   summary.py       — Console summary output

__version__ = "1.0"
