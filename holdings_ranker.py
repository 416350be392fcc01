# ============================================================
#  PORTFOLIO HOLDINGS RANKER
#  Reads fund portfolio workbooks, streams one scored holding
#  per line (JSON) to stdout, optional Excel + console summary
# ============================================================
import argparse
import logging
import sys
from tqdm import tqdm
from holdrank.config import CFG
from holdrank.data_screener import ScreenerClient
from holdrank.export_excel import style_and_export
from holdrank.pipeline import run_pipeline
from holdrank.resolver import InstrumentResolver
from holdrank.store import FileStore, MongoStore
from holdrank.summary import print_summary


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Score the holdings of fund portfolio workbooks.")
    p.add_argument("files", nargs="+", help=".xlsx portfolio disclosures")
    p.add_argument("--store", default=CFG["store_file"], help="pickle store path")
    p.add_argument("--mongo", action="store_true", help="use MONGO_URI instead of the pickle store")
    p.add_argument("--company-url", default=CFG["company_url"], help="live directory base URL")
    p.add_argument("--offline", action="store_true", help="never refresh from the live directory")
    p.add_argument("--excel", metavar="OUT.xlsx", help="also write an Excel workbook")
    p.add_argument("--summary", action="store_true", help="print a summary to stderr")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=CFG["log_level"].upper(), stream=sys.stderr,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.mongo:
        if not CFG["mongo_uri"]:
            print("  ⚠️  MONGO_URI is not set", file=sys.stderr)
            return 2
        store = MongoStore.connect(CFG["mongo_uri"], CFG["database"], CFG["collection"])
    else:
        store = FileStore(args.store)
    source = None if args.offline else ScreenerClient(args.company_url)
    resolver = InstrumentResolver(store, source)

    files = tqdm(args.files, desc="Workbooks", file=sys.stderr)
    rows = run_pipeline(files, resolver, out=sys.stdout)

    if args.summary:
        print_summary(rows)
    if args.excel:
        style_and_export(rows, args.excel)
    print(f"\n✅  DONE! {len(rows)} holdings scored", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
