"""Import user profiles from a CSV export into the users table.

Usage example:
  python scripts/import_users.py employees.csv
  python scripts/import_users.py employees.csv --clear
"""

from __future__ import annotations

import argparse
import csv
import os
import sys
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from beacon.database import SessionLocal
from beacon.services import user_import_service


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bulk upsert user profiles (keyed by email) from CSV.")
    parser.add_argument("csv_path", help="CSV file with a header row (Name, Email, City, Job Title, Company Name)")
    parser.add_argument("--clear", action="store_true", help="Delete all existing profiles before importing")
    parser.add_argument("--encoding", default="utf-8-sig", help="CSV file encoding (default: utf-8-sig)")
    return parser.parse_args()


def read_rows(path: Path, encoding: str) -> list[dict]:
    with path.open(newline="", encoding=encoding) as handle:
        return list(csv.DictReader(handle))


def main() -> None:
    args = parse_args()
    rows = read_rows(Path(args.csv_path), args.encoding)
    db = SessionLocal()
    try:
        if args.clear:
            cleared = user_import_service.clear_users(db)
            print(f"cleared={cleared}")
        imported = user_import_service.import_users(db, rows)
    finally:
        db.close()
    print(f"rows={len(rows)} imported={imported} skipped={len(rows) - imported}")


if __name__ == "__main__":
    main()
