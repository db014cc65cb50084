from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # App
    APP_NAME: str = "Mock Stock Trading Platform"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Shared admin password. Override in .env for any real event.
    ADMIN_PASSWORD: str = "admin123"

    # Session defaults (restored by reset_platform)
    STARTING_BALANCE: float = 100_000
    PORTFOLIO_ALLOCATION_TIME: int = 600  # seconds

    # Negotiation
    TRADE_REQUEST_TTL_SECONDS: float = 20.0
    CIRCUIT_LIMIT_PCT: float = 0.08

    # Phase timer
    TICK_INTERVAL_SECONDS: float = 1.0

    JOIN_CODE_LENGTH: int = 6


settings = Settings()
