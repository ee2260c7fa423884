from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.application.ports.cache import CachePort
from app.application.ports.tabular_store import TabularStorePort
from app.application.reports.daily import DEFAULT_BRANCHES
from app.application.use_cases.booking_collection import BookingCollection
from app.application.use_cases.manage_bookings import ManageBookingsUseCase
from app.application.use_cases.promo_hunter import PromoHunterMatcher
from app.application.use_cases.reports import ReportsUseCase
from app.domain.entities.column_map import ColumnMap, get_column_map
from app.infrastructure.cache.memory_cache import MemoryTTLCache
from app.infrastructure.store.json_store import JsonTabularStore
from app.infrastructure.store.memory_store import MemoryTabularStore
from app.infrastructure.store.sheets_store import GoogleSheetsTabularStore


_store: TabularStorePort | None = None
_cache: CachePort | None = None


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_db_column_map() -> ColumnMap:
    return get_column_map(settings.DB_SCHEMA_VERSION)


@lru_cache
def get_intake_column_map() -> ColumnMap:
    return get_column_map(settings.INTAKE_SCHEMA_VERSION)


def get_store() -> TabularStorePort:
    global _store
    if _store is None:
        logger = logging.getLogger(__name__)
        provider = settings.STORE_PROVIDER.lower()
        if provider == "auto":
            if settings.GOOGLE_SHEET_ID:
                provider = "sheets"
            elif settings.ENV.lower() in {"dev", "local"}:
                provider = "json"
            else:
                provider = "memory"

        if provider == "sheets":
            _store = GoogleSheetsTabularStore(
                spreadsheet_id=settings.GOOGLE_SHEET_ID or "",
                credentials_path=settings.GOOGLE_CREDENTIALS_PATH,
                table_widths={
                    settings.INTAKE_TABLE: get_intake_column_map().width,
                    settings.DB_TABLE: get_db_column_map().width,
                },
            )
        elif provider == "json":
            _store = JsonTabularStore(data_dir=settings.JSON_STORE_DIR)
        elif provider == "memory":
            _store = MemoryTabularStore()
        else:
            raise ValueError(f"Unknown STORE_PROVIDER: {settings.STORE_PROVIDER}")
        logger.info("Using %s tabular store", type(_store).__name__)
    return _store


def get_cache() -> CachePort:
    global _cache
    if _cache is None:
        _cache = MemoryTTLCache()
    return _cache


def get_booking_collection() -> BookingCollection:
    return BookingCollection(
        store=get_store(),
        cache=get_cache(),
        column_map=get_db_column_map(),
        table=settings.DB_TABLE,
        timezone=get_timezone(),
        ttl_seconds=settings.CACHE_TTL_SECONDS,
    )


def get_report_branches() -> tuple[str, ...]:
    configured = [b.strip() for b in settings.REPORT_BRANCHES.split(",") if b.strip()]
    return tuple(configured) or DEFAULT_BRANCHES


def get_manage_bookings_use_case() -> ManageBookingsUseCase:
    return ManageBookingsUseCase(
        store=get_store(),
        collection=get_booking_collection(),
        matcher=PromoHunterMatcher(reporting=settings.PROMO_MATCH_REPORTING),
        intake_map=get_intake_column_map(),
        intake_table=settings.INTAKE_TABLE,
        timezone=get_timezone(),
        default_page_size=settings.DEFAULT_PAGE_SIZE,
    )


def get_reports_use_case() -> ReportsUseCase:
    return ReportsUseCase(
        collection=get_booking_collection(),
        timezone=get_timezone(),
        branches=get_report_branches(),
        high_value_threshold=settings.HIGH_VALUE_THRESHOLD,
        kpi_date_basis=settings.KPI_DATE_BASIS,
        trend_default_days=settings.TREND_DEFAULT_DAYS,
    )
