from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Locales
    DEFAULT_LOCALE: str = "en"
    SUPPORTED_LOCALES: list[str] = ["en", "fr"]

    # Pattern safety
    MAX_PATTERN_LENGTH: int = 10_000
    MAX_INPUT_LENGTH: int = 10_000  # Regex predicates refuse longer inputs

    # Execution
    MAX_CONCURRENCY: int | None = None  # None sizes the dispatcher from the CPU count
    NESTED_ON_LOCAL_FAILURE: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    model_config = SettingsConfigDict(env_prefix="FIELDCHECK_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
