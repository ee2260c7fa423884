from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Sequence

from app.application.exceptions import BookingNotFoundError, StoreUnavailableError
from app.application.ports.tabular_store import TabularStorePort


class JsonTabularStore(TabularStorePort):
    """One JSON file per table, holding the rows (header first) as a list of lists."""

    def __init__(self, data_dir: str = "./data/tables") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, table: str) -> threading.Lock:
        with self._lock_lock:
            if table not in self._locks:
                self._locks[table] = threading.Lock()
            return self._locks[table]

    def _get_file_path(self, table: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in table)
        return self._data_dir / f"{safe}.json"

    def _load_rows(self, table: str) -> list[list[Any]]:
        """Load table rows, empty if the file is missing."""
        file_path = self._get_file_path(table)
        if not file_path.exists():
            return []
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreUnavailableError(f"Table file {file_path.name} is corrupted") from e
        except OSError as e:
            raise StoreUnavailableError(f"Cannot read table file {file_path.name}") from e
        rows = data.get("rows", []) if isinstance(data, dict) else data
        return [list(row) for row in rows]

    def _save_rows(self, table: str, rows: list[list[Any]]) -> None:
        """Save table rows atomically."""
        file_path = self._get_file_path(table)
        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump({"table": table, "rows": rows}, f, indent=2, ensure_ascii=False)
            # Atomic rename
            temp_path.replace(file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StoreUnavailableError(f"Cannot write table file {file_path.name}") from e

    def read_all(self, table: str) -> list[list[Any]]:
        with self._get_lock(table):
            return self._load_rows(table)

    def append(self, table: str, row: Sequence[Any]) -> None:
        with self._get_lock(table):
            rows = self._load_rows(table)
            rows.append(list(row))
            self._save_rows(table, rows)
        self._logger.info("Row appended", extra={"table": table, "row_number": len(rows)})

    def update_row(self, table: str, row_number: int, row: Sequence[Any]) -> None:
        with self._get_lock(table):
            rows = self._load_rows(table)
            self._check_bounds(table, rows, row_number)
            rows[row_number - 1] = list(row)
            self._save_rows(table, rows)
        self._logger.info("Row updated", extra={"table": table, "row_number": row_number})

    def delete_row(self, table: str, row_number: int) -> None:
        with self._get_lock(table):
            rows = self._load_rows(table)
            self._check_bounds(table, rows, row_number)
            del rows[row_number - 1]
            self._save_rows(table, rows)
        self._logger.info("Row deleted", extra={"table": table, "row_number": row_number})

    def ping(self) -> None:
        if not self._data_dir.is_dir():
            raise StoreUnavailableError(f"Data directory {self._data_dir} is missing")

    @staticmethod
    def _check_bounds(table: str, rows: list[list[Any]], row_number: int) -> None:
        if row_number < 2 or row_number > len(rows):
            raise BookingNotFoundError(f"Row {row_number} does not exist in {table}")
