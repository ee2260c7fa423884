from __future__ import annotations

import logging
from typing import Any
from zoneinfo import ZoneInfo

from app.application.ports.cache import CachePort
from app.application.ports.tabular_store import TabularStorePort
from app.application.utils.record_parser import rows_to_bookings
from app.domain.entities.booking import Booking
from app.domain.entities.column_map import ColumnMap

CACHE_KEY = "db_bookings_all"
DEFAULT_TTL_SECONDS = 300.0


class BookingCollection:
    """Parsed master-table bookings behind a short-lived cache snapshot."""

    def __init__(
        self,
        store: TabularStorePort,
        cache: CachePort,
        column_map: ColumnMap,
        table: str,
        timezone: ZoneInfo,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._store = store
        self._cache = cache
        self._column_map = column_map
        self._table = table
        self._timezone = timezone
        self._ttl_seconds = ttl_seconds
        self._logger = logging.getLogger(__name__)

    @property
    def column_map(self) -> ColumnMap:
        return self._column_map

    @property
    def table(self) -> str:
        return self._table

    def load(self) -> list[Booking]:
        cached = self._cache.get(CACHE_KEY)
        if cached is not None:
            return list(cached)
        rows = self.read_rows()
        bookings = rows_to_bookings(rows, self._column_map, self._timezone)
        self._cache.set(CACHE_KEY, tuple(bookings), self._ttl_seconds)
        self._logger.info("Booking collection loaded", extra={"table": self._table, "bookings": len(bookings)})
        return bookings

    def read_rows(self) -> list[list[Any]]:
        """Uncached raw rows, header included."""
        rows = self._store.read_all(self._table)
        if rows and len(rows[0]) < self._column_map.width:
            self._logger.warning(
                "Header narrower than column map",
                extra={"table": self._table, "reason": f"{len(rows[0])} < {self._column_map.width}"},
            )
        return rows

    def invalidate(self) -> None:
        self._cache.invalidate(CACHE_KEY)
