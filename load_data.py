# load_data.py
"""
Load a bank CSV export into the database as imported transactions.

Usage example:
    python load_data.py data/bank_export.csv --company-id 1 --account-id 4
"""

from scripts.ingest import build_parser, load_into_db, parse_bank_csv


def main(argv=None):
    args = build_parser().parse_args(argv)
    transactions_list, stats = parse_bank_csv(args.file)
    loaded = load_into_db(transactions_list, args.company_id, args.account_id, args.currency.upper())

    print("Load complete.")
    print(f"Total CSV rows read:   {stats['n_rows']}")
    print(f"Transactions loaded:   {loaded}")
    print(f"Rows with errors:      {stats['n_errors']}")
    print(f"Duplicate rows:        {stats['n_duplicates']}")


if __name__ == "__main__":
    main()
