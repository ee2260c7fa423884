from __future__ import annotations

import threading
from typing import Any, Sequence

from app.application.exceptions import BookingNotFoundError
from app.application.ports.tabular_store import TabularStorePort


class MemoryTabularStore(TabularStorePort):
    def __init__(self, tables: dict[str, list[list[Any]]] | None = None) -> None:
        self._tables: dict[str, list[list[Any]]] = {
            name: [list(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self._lock = threading.Lock()

    def read_all(self, table: str) -> list[list[Any]]:
        with self._lock:
            return [list(row) for row in self._tables.get(table, [])]

    def append(self, table: str, row: Sequence[Any]) -> None:
        with self._lock:
            self._tables.setdefault(table, []).append(list(row))

    def update_row(self, table: str, row_number: int, row: Sequence[Any]) -> None:
        with self._lock:
            rows = self._rows_for_write(table, row_number)
            rows[row_number - 1] = list(row)

    def delete_row(self, table: str, row_number: int) -> None:
        with self._lock:
            rows = self._rows_for_write(table, row_number)
            del rows[row_number - 1]

    def ping(self) -> None:
        return None

    def _rows_for_write(self, table: str, row_number: int) -> list[list[Any]]:
        rows = self._tables.get(table, [])
        if row_number < 2 or row_number > len(rows):
            raise BookingNotFoundError(f"Row {row_number} does not exist in {table}")
        return rows
