"""
Sample Transaction Dataset Generator
Writes a transactions CSV in the layout the ingestion pipeline reads.

Usage:
    python scripts/generate_dataset.py --rows 100000 --output data/generated/transactions.csv
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.data.generators import TransactionGenerator  # noqa: E402

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "generated"


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate sample transactions")
    parser.add_argument("--rows", type=int, default=100_000, help="Number of rows (default: 100000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--days", type=int, default=730, help="Days of history (default: 730)")
    parser.add_argument(
        "--output",
        type=Path,
        default=OUTPUT_DIR / "transactions.csv",
        help="Output CSV path",
    )
    args = parser.parse_args()

    print(f"Generating {args.rows:,} transactions...")
    generator = TransactionGenerator(seed=args.seed, days=args.days)
    path = generator.write_csv(args.output, n=args.rows)
    print(f"   {path}: {args.rows:,} rows")


if __name__ == "__main__":
    main()
