from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    DEFAULT_TIMEZONE: str = "America/Chicago"

    AVAILABILITY_API_URL: str | None = None
    AVAILABILITY_API_KEY: str | None = None
    CART_API_URL: str | None = None
    CART_API_KEY: str | None = None
    BOOKING_API_URL: str | None = None
    BOOKING_API_KEY: str | None = None
    HTTP_TIMEOUT_SECONDS: float = 10.0

    SERVICE_SELECTION_PATH: str = "/services"
    BOOKING_PAGE_PATH: str = "/booking-calendar"
    CART_PATH: str = "/cart"
    CONFIRMATION_PATH: str = "/booking-confirmation"

    DEFAULT_DEPOSIT_RATIO: float = 0.3
    # The calendar widget reports JavaScript month indexes (January == 0)
    WIDGET_MONTH_BASE: int = 0
    SESSION_STORE_DIR: str = "./data/sessions"
    CART_AUTO_VIEW: bool = True

    MAX_OPEN_PAGES: int = 500
    MAX_SESSIONS: int = 1000


settings = Settings()
