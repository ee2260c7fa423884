from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_TIMEZONE: str = "Asia/Manila"

    # auto: sheets when GOOGLE_SHEET_ID is set, json for dev/local, memory otherwise
    STORE_PROVIDER: str = "auto"
    JSON_STORE_DIR: str = "./data/tables"
    GOOGLE_SHEET_ID: str | None = None
    GOOGLE_CREDENTIALS_PATH: str | None = None

    INTAKE_TABLE: str = "Intake"
    DB_TABLE: str = "DB"
    INTAKE_SCHEMA_VERSION: str = "intake_v37"
    DB_SCHEMA_VERSION: str = "db_v44"

    CACHE_TTL_SECONDS: float = 300.0
    DEFAULT_PAGE_SIZE: int = 50
    TREND_DEFAULT_DAYS: int = 20
    HIGH_VALUE_THRESHOLD: float = 50000.0
    KPI_DATE_BASIS: str = "appointment"
    PROMO_MATCH_REPORTING: str = "all"
    REPORT_BRANCHES: str = ""


settings = Settings()
