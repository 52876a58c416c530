#!/usr/bin/env python3
"""Dataset generation script for performance testing.

Generates synthetic contact / deal / offer CSV files using the same header
labels as the downloadable templates, with a configurable share of rows that
the importer is expected to skip (blank identity) or flag as duplicates.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

FIRST_NAMES = ["Jane", "John", "Maria", "Wei", "Aisha", "Carlos", "Olga", "Ken"]
LAST_NAMES = ["Doe", "Smith", "Garcia", "Chen", "Khan", "Silva", "Ivanova", "Sato"]
STREETS = ["Main St", "Oak Ave", "Pine Rd", "Maple Dr", "Cedar Ln", "Elm Ct"]


def _names(rng: np.random.Generator, rows: int) -> list[str]:
    first = rng.choice(FIRST_NAMES, rows)
    last = rng.choice(LAST_NAMES, rows)
    return [f"{f} {l}" for f, l in zip(first, last)]


def _addresses(rng: np.random.Generator, rows: int) -> list[str]:
    numbers = rng.integers(1, 9999, rows)
    streets = rng.choice(STREETS, rows)
    return [f"{n} {s}" for n, s in zip(numbers, streets)]


def generate_contacts(rows: int, seed: int = 42, dup_ratio: float = 0.05, blank_ratio: float = 0.02) -> pd.DataFrame:
    """Contacts with unique emails, then some duplicated and some blanked rows."""
    rng = np.random.default_rng(seed)
    df = pd.DataFrame(
        {
            "Name": _names(rng, rows),
            "Email": [f"user{i}@example.com" for i in range(rows)],
            "Phone": [f"555-{n:04d}" for n in rng.integers(0, 10000, rows)],
            "Type": rng.choice(["Buyer", "Seller", "Vendor", "Lead"], rows),
            "Notes": "",
        }
    )
    n_dup = int(rows * dup_ratio)
    if n_dup:
        # 既出メールを再利用 -> バッチ内重複
        idx = rng.choice(rows, n_dup, replace=False)
        df.loc[idx, "Email"] = df.loc[rng.choice(rows, n_dup), "Email"].to_numpy()
    n_blank = int(rows * blank_ratio)
    if n_blank:
        idx = rng.choice(rows, n_blank, replace=False)
        df.loc[idx, ["Name", "Email"]] = ""
    return df


def generate_deals(rows: int, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    prices = np.round(rng.uniform(50_000, 2_000_000, rows), -3)
    return pd.DataFrame(
        {
            "MLS Number": [f"MLS{n:07d}" for n in rng.integers(0, 10_000_000, rows)],
            "Address": _addresses(rng, rows),
            "Client Name": _names(rng, rows),
            "Price": [f"${p:,.0f}" for p in prices],
            "Type": rng.choice(["Sale", "Rental"], rows),
            "Status": rng.choice(["Lead", "Active", "Under Contract", "Closed", "Lost"], rows),
            "Commission Rate": rng.choice([2.5, 3.0, 5.0], rows),
            "Notes": "",
        }
    )


def generate_offers(rows: int, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    dates = pd.date_range("2024-01-01", "2024-12-31", periods=100)
    return pd.DataFrame(
        {
            "Property Address": _addresses(rng, rows),
            "Buyer Name": _names(rng, rows),
            "Buyer Email": [f"buyer{i}@example.com" for i in range(rows)],
            "Offer Amount": np.round(rng.uniform(50_000, 2_000_000, rows), -2),
            "Earnest Money %": rng.choice([1, 2, 3, 5], rows),
            "Loan Type": rng.choice(["Conventional", "FHA", "VA", "Cash"], rows),
            "Status": rng.choice(["Pending", "Accepted", "Countered", "Rejected"], rows),
            "Submitted Date": pd.DatetimeIndex(rng.choice(dates, rows)).strftime("%Y-%m-%d"),
            "Notes": "",
        }
    )


GENERATORS = {
    "contact": generate_contacts,
    "deal": generate_deals,
    "offer": generate_offers,
}


def write_csv(df: pd.DataFrame, output_path: Path, sep: str = ",") -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, sep=sep, index=False)
    print(f"Created CSV file: {output_path}")
    print(f"  Rows: {len(df):,} (+ 1 header row)")
    print(f"  Columns: {len(df.columns)}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic CRM CSV datasets for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 50k contacts (default)
  %(prog)s data/contacts_perf.csv

  # 100k deals, semicolon separated
  %(prog)s data/deals_perf.csv --kind deal --rows 100000 --sep ';'
        """,
    )
    parser.add_argument("output", type=Path, help="Output CSV path")
    parser.add_argument("--kind", choices=sorted(GENERATORS), default="contact")
    parser.add_argument("--rows", type=int, default=50_000, help="Number of data rows (default: 50,000)")
    parser.add_argument("--sep", default=",", choices=[",", ";", "\t"], help="Field delimiter")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--dry-run", action="store_true", help="Show the plan without writing")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1

    print("Dataset generation plan:")
    print(f"  Output file: {args.output}")
    print(f"  Kind: {args.kind}")
    print(f"  Rows: {args.rows:,}")
    print(f"  Delimiter: {args.sep!r}")
    print(f"  Random seed: {args.seed}")
    if args.dry_run:
        print("\n[DRY RUN] Would generate files but not creating them.")
        return 0

    try:
        df = GENERATORS[args.kind](args.rows, seed=args.seed)
        write_csv(df, args.output, sep=args.sep)
    except (OSError, ValueError) as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
