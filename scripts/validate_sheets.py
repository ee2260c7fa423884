#!/usr/bin/env python3
"""
Check that the Intake and DB tables match the configured column maps.

Usage:
  python3 scripts/validate_sheets.py
  python3 scripts/validate_sheets.py --init   # write header rows into empty tables

Reads the same settings as the API (.env), so it checks whichever store
STORE_PROVIDER resolves to.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.application.exceptions import StoreUnavailableError
from app.core.config import settings
from app.domain.entities.column_map import ColumnMap
from app.wiring.dependencies import get_db_column_map, get_intake_column_map, get_store


def header_row(column_map: ColumnMap) -> list[str]:
    header = [""] * column_map.width
    for name, index in column_map.indices.items():
        header[index] = name
    return header


def check_table(table: str, column_map: ColumnMap, init: bool) -> bool:
    store = get_store()
    rows = store.read_all(table)
    print(f"\n{table} ({column_map.name}, {column_map.width} columns)")
    if not rows:
        if init:
            store.append(table, header_row(column_map))
            print("  empty -> header written")
            return True
        print("  ❌ table is empty (run with --init to write a header)")
        return False

    header = rows[0]
    data_rows = len(rows) - 1
    print(f"  header columns: {len(header)}, data rows: {data_rows}")
    if len(header) < column_map.width:
        print(f"  ❌ header has {len(header)} columns, expected {column_map.width}")
        return False

    wide = [i for i, row in enumerate(rows[1:], start=2) if len(row) > column_map.width]
    if wide:
        print(f"  ⚠️  {len(wide)} rows are wider than the column map (first: row {wide[0]})")
    print("  ✅ layout ok")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--init", action="store_true", help="Write header rows into empty tables")
    args = parser.parse_args()

    print(f"ENV={settings.ENV} STORE_PROVIDER={settings.STORE_PROVIDER}")
    try:
        results = [
            check_table(settings.INTAKE_TABLE, get_intake_column_map(), args.init),
            check_table(settings.DB_TABLE, get_db_column_map(), args.init),
        ]
    except StoreUnavailableError as e:
        print(f"❌ Store unavailable: {e}")
        return 2
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
