from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./nurseshift.db"

    # Scheduling
    DEFAULT_TIMEZONE: str = "America/Chicago"
    DEFAULT_SHIFT_START: str = "07:00"
    DEFAULT_SHIFT_END: str = "19:00"
    MAX_CALENDAR_RANGE_DAYS: int = 93
    UPCOMING_SHIFTS_LIMIT: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
