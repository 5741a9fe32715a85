import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GIRAFFE_", env_file=".env", extra="ignore")

    # Backend root, e.g. https://api.giraffecabs.lk
    api_url: str = "http://localhost:5000"
    request_timeout: float = 30
    log_level: str = "INFO"

    @field_validator("api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or Settings()
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(settings.log_level)
