from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DB_URL: str = "sqlite+aiosqlite:///./data/store.db"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Remote catalog feed
    CATALOG_BASE_URL: str = "https://promonitor.no"
    CATALOG_PRODUCTS_PATH: str = "/products.json?limit=250"
    CATALOG_FEATURED_PATH: str = "/collections/frontpage/products.json?limit=50"
    CATALOG_SYNC_ON_START: bool = Field(
        default=False,
        validation_alias=AliasChoices("CATALOG_SYNC_ON_START", "PROMONITOR_SYNC"),
    )
    CATALOG_COLLECTIONS_ENABLED: bool = Field(
        default=False,
        validation_alias=AliasChoices("CATALOG_COLLECTIONS_ENABLED", "PROMONITOR_COLLECTIONS"),
    )
    SEED_PRODUCTS: bool = False

    # Uploads
    UPLOAD_DIR: str = "public/uploads"
    UPLOAD_MAX_BYTES: int = Field(default=2 * 1024 * 1024, ge=1)

    # Admin back-office
    ADMIN_TOKEN: str = ""
    DEFAULT_ADMIN_EMAIL: str = ""
    DEFAULT_ADMIN_PASSWORD: str = ""

    WEB_HOST: str = "0.0.0.0"
    WEB_PORT: int = 3000
    CART_COOKIE_NAME: str = "cart_id"

    # Proxy (optional)
    HTTP_PROXY_URL: str | None = None

    # HTTP clients
    HTTP_TIMEOUT_CONNECT: float = 3.0
    HTTP_TIMEOUT_READ: float = 15.0
    HTTP_TIMEOUT_WRITE: float = 15.0
    HTTP_TIMEOUT_TOTAL: float = 30.0
    HTTP_RETRY_ATTEMPTS: int = 2
    HTTP_RETRY_BACKOFF_INITIAL: float = 0.5
    HTTP_RETRY_BACKOFF_MAX: float = 8.0
    HTTP_RETRY_STATUS_CODES: tuple[int, ...] = (500, 502, 503, 504)
    HTTP_CIRCUIT_BREAKER_MAX_FAILURES: int = 5
    HTTP_CIRCUIT_BREAKER_BASE_DELAY: float = 1.0
    HTTP_CIRCUIT_BREAKER_MAX_DELAY: float = 30.0

    ENVIRONMENT: str = Field(default="local")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("CATALOG_SYNC_ON_START", "CATALOG_COLLECTIONS_ENABLED", "SEED_PRODUCTS", mode="before")
    @classmethod
    def _parse_flag(cls, v):
        # env flags arrive as "1"/"0"
        if v in (None, ""):
            return False
        if isinstance(v, str):
            return v.strip().lower() in {"1", "true", "yes", "on"}
        return bool(v)

    @field_validator("CATALOG_BASE_URL")
    @classmethod
    def _strip_base(cls, v: str) -> str:
        return v.rstrip("/")


settings = Settings()
