# parse_data.py
"""
Parse a bank CSV export and print basic stats without touching the database.

Usage example:
    python parse_data.py data/bank_export.csv
"""

import sys

from paintwall.core.money import format_cents
from scripts.ingest import FILE_PATH, parse_bank_csv


def main():
    file_path = sys.argv[1] if len(sys.argv) > 1 else FILE_PATH
    transactions_list, stats = parse_bank_csv(file_path)

    print(f"Total CSV rows read:   {stats['n_rows']}")
    print(f"Transactions parsed:   {stats['n_transactions']}")
    print(f"Rows with errors:      {stats['n_errors']}")
    print(f"Duplicate rows:        {stats['n_duplicates']}")

    if transactions_list:
        income = sum(t["amount_cents"] for t in transactions_list if t["amount_cents"] > 0)
        spending = sum(t["amount_cents"] for t in transactions_list if t["amount_cents"] < 0)
        print(f"Money in:              {format_cents(income)}")
        print(f"Money out:             {format_cents(spending)}")

    if stats["error_examples"]:
        print("\nExample errors:")
        for ex in stats["error_examples"]:
            print(f"- Row {ex['row_number']}: {ex['error']}")


if __name__ == "__main__":
    main()
