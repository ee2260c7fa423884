import logging

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from app.api.v1.analytics import router as analytics_router
from app.api.v1.bookings import router as bookings_router
from app.api.v1.dashboard import router as dashboard_router
from app.application.exceptions import StoreUnavailableError
from app.application.ports.tabular_store import TabularStorePort
from app.core.config import settings
from app.wiring.dependencies import get_store


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("table", "row_number", "record_id", "branch", "rows", "bookings", "matches", "section", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Clinic Booking Reports", version="1.0.0")

app.include_router(bookings_router, prefix="/api/bookings", tags=["bookings"])
app.include_router(dashboard_router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(analytics_router, prefix="/api/analytics", tags=["analytics"])


@app.get("/health")
def health(store: TabularStorePort = Depends(get_store)):
    try:
        store.ping()
    except StoreUnavailableError as e:
        logging.getLogger(__name__).warning("Health check failed", extra={"error": str(e)})
        return JSONResponse(status_code=503, content={"status": "DEGRADED", "store": "unreachable", "env": settings.ENV})
    return {"status": "OK", "store": "connected", "env": settings.ENV}
