from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PUSHIN_PAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = "https://api.pushinpay.com.br"

    # httpx timeouts, in seconds
    timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 10.0

    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"


settings = Settings()
