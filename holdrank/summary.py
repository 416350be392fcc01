# holdrank/summary.py — Console summary output
import sys
import pandas as pd


def print_summary(rows: list, file=None):
    file = file or sys.stderr
    if not rows:
        print("\n  ⚠️  No holdings were scored.", file=file)
        return
    df = pd.DataFrame(rows)
    print("\n" + "=" * 65, file=file)
    print("  TOP 20 HOLDINGS", file=file)
    print("=" * 65, file=file)
    show = ["Name of the Instrument", "resolvedName", "marketCap",
            "stockRate", "f_score", "Percentage of AUM"]
    top = df.sort_values("stockRate", ascending=False)
    print(top[[c for c in show if c in df.columns]].head(20).to_string(index=False), file=file)

    print("\n  MEDIAN SCORES BY CAP CATEGORY", file=file)
    print("-" * 45, file=file)
    print(df.groupby("marketCap")[["stockRate", "f_score"]].median()
            .sort_values("stockRate", ascending=False).round(2).to_string(), file=file)
