from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    GOV_API_BASE_URL: str | None = None
    GOV_API_TIMEOUT_SECONDS: float = 10.0

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SLOT_WINDOW_START: str = "09:00"
    SLOT_WINDOW_END: str = "18:00"
    SLOT_MINUTE_STEP: int = 5
    USE_12_HOUR_CLOCK: bool = True

    DEFAULT_SERVICE_ID: int = 1
    FORM_CLOSE_DELAY_SECONDS: float = 1.5
    AUTO_LOGOUT_SECONDS: int = 30 * 60


settings = Settings()
