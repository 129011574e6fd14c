"""
SheetDesk command line client.

Usage:
    sheetdesk list
    sheetdesk upload data.xlsx
    sheetdesk show 3 --filter name=an --filter city=ber
    sheetdesk delete 3 --yes
"""

import argparse
import sys
from typing import List, Optional, Tuple

from ..core.errors import ValidationError
from .api_client import ClientError, SheetDeskClient
from .table_view import TableView


def parse_filter(raw: str) -> Tuple[str, str]:
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"Filter must look like COLUMN=TEXT, got '{raw}'")
    column, query = raw.split("=", 1)
    return column, query


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sheetdesk", description="Browse uploaded spreadsheet datasets")
    parser.add_argument("--api-url", default=None, help="Base URL of the SheetDesk API")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List uploaded datasets, newest first")

    upload = sub.add_parser("upload", help="Upload an .xlsx or .xls file")
    upload.add_argument("file")

    show = sub.add_parser("show", help="Print the rows of a dataset")
    show.add_argument("dataset_id", type=int)
    show.add_argument("--filter", dest="filters", action="append", type=parse_filter, default=[],
                      metavar="COLUMN=TEXT", help="Case-insensitive 'contains' filter; repeatable")

    delete = sub.add_parser("delete", help="Delete a dataset and its file")
    delete.add_argument("dataset_id", type=int)
    delete.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def run(args: argparse.Namespace, client: SheetDeskClient, out=sys.stdout) -> int:
    if args.command == "list":
        datasets = client.list_datasets()
        for d in datasets:
            print(f"{d['originalname']} (#{d['id']})  {d['uploaded_at']}", file=out)
        print(f"Found {len(datasets)} dataset(s).", file=out)

    elif args.command == "upload":
        result = client.upload(args.file)
        print(f"Uploaded. Rows saved: {result['rows_saved']} "
              f"(dataset #{result['dataset_id']}, sheet '{result['sheet_name']}')", file=out)

    elif args.command == "show":
        view = TableView()
        view.load(client.fetch_rows(args.dataset_id))
        if args.filters:
            for column, query in args.filters:
                view.add_filter(column, query)
            view.apply_filters()
        print(view.to_text(), file=out)

    elif args.command == "delete":
        if not args.yes:
            answer = input("Delete this dataset and its file? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Aborted.", file=out)
                return 1
        client.delete_dataset(args.dataset_id)
        print("Deleted dataset.", file=out)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    client = SheetDeskClient(base_url=args.api_url)
    try:
        return run(args, client)
    except (ClientError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
