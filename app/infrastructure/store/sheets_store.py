from __future__ import annotations

import logging
import threading
from typing import Any, Sequence

import gspread
from gspread.exceptions import GSpreadException, WorksheetNotFound

from app.application.exceptions import BookingNotFoundError, StoreUnavailableError
from app.application.ports.tabular_store import TabularStorePort
from app.domain.entities.column_map import column_letter

VALUE_INPUT_OPTION = "USER_ENTERED"


class GoogleSheetsTabularStore(TabularStorePort):
    """Tables are worksheets of one spreadsheet, accessed with a service account."""

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_path: str | None = None,
        table_widths: dict[str, int] | None = None,
        client: gspread.Client | None = None,
    ) -> None:
        if not spreadsheet_id:
            raise ValueError("GOOGLE_SHEET_ID is required for the Google Sheets store.")
        self._spreadsheet_id = spreadsheet_id
        self._credentials_path = credentials_path
        self._table_widths = dict(table_widths or {})
        self._client = client
        self._spreadsheet: gspread.Spreadsheet | None = None
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _get_spreadsheet(self) -> gspread.Spreadsheet:
        with self._lock:
            if self._spreadsheet is None:
                client = self._client
                if client is None:
                    client = (
                        gspread.service_account(filename=self._credentials_path)
                        if self._credentials_path
                        else gspread.service_account()
                    )
                    self._client = client
                self._spreadsheet = client.open_by_key(self._spreadsheet_id)
            return self._spreadsheet

    def _worksheet(self, table: str) -> gspread.Worksheet:
        try:
            return self._get_spreadsheet().worksheet(table)
        except WorksheetNotFound as e:
            raise StoreUnavailableError(f"Worksheet {table!r} not found") from e

    def _range(self, table: str) -> str | None:
        width = self._table_widths.get(table)
        return f"A:{column_letter(width)}" if width else None

    def read_all(self, table: str) -> list[list[Any]]:
        try:
            worksheet = self._worksheet(table)
            cell_range = self._range(table)
            rows = worksheet.get_values(cell_range) if cell_range else worksheet.get_all_values()
        except (GSpreadException, OSError) as e:
            self._logger.error("Sheet read failed", extra={"table": table, "error": str(e)})
            raise StoreUnavailableError(f"Failed to read {table}") from e
        self._logger.debug("Sheet read", extra={"table": table, "rows": len(rows)})
        return [list(row) for row in rows]

    def append(self, table: str, row: Sequence[Any]) -> None:
        try:
            self._worksheet(table).append_row(list(row), value_input_option=VALUE_INPUT_OPTION)
        except (GSpreadException, OSError) as e:
            self._logger.error("Sheet append failed", extra={"table": table, "error": str(e)})
            raise StoreUnavailableError(f"Failed to append to {table}") from e
        self._logger.info("Row appended", extra={"table": table})

    def update_row(self, table: str, row_number: int, row: Sequence[Any]) -> None:
        if row_number < 2:
            raise BookingNotFoundError(f"Row {row_number} does not exist in {table}")
        last = column_letter(len(row))
        try:
            self._worksheet(table).update(
                values=[list(row)],
                range_name=f"A{row_number}:{last}{row_number}",
                value_input_option=VALUE_INPUT_OPTION,
            )
        except (GSpreadException, OSError) as e:
            self._logger.error("Sheet update failed", extra={"table": table, "row_number": row_number, "error": str(e)})
            raise StoreUnavailableError(f"Failed to update row {row_number} in {table}") from e
        self._logger.info("Row updated", extra={"table": table, "row_number": row_number})

    def delete_row(self, table: str, row_number: int) -> None:
        if row_number < 2:
            raise BookingNotFoundError(f"Row {row_number} does not exist in {table}")
        try:
            self._worksheet(table).delete_rows(row_number)
        except (GSpreadException, OSError) as e:
            self._logger.error("Sheet delete failed", extra={"table": table, "row_number": row_number, "error": str(e)})
            raise StoreUnavailableError(f"Failed to delete row {row_number} in {table}") from e
        self._logger.info("Row deleted", extra={"table": table, "row_number": row_number})

    def ping(self) -> None:
        try:
            self._get_spreadsheet().fetch_sheet_metadata()
        except (GSpreadException, OSError) as e:
            raise StoreUnavailableError("Google Sheets is unreachable") from e
