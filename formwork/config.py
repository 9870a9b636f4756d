from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for production (structured JSON), False for dev (colored)

    # Extraction
    NUMBER_MAX_LENGTH: int = 128  # Longest numeric string NumberFormat will normalize
    AUTO_PROMOTE_MISSING: bool = True  # Missing required bool/record/list fields become False/{}/[]

    # Reports
    REPORT_MAX_ERRORS: int = 50

    class Config:
        env_prefix = "FORMWORK_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
