"""Application configuration from environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "Courtly"
    debug: bool = True
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Booking engine
    sunset_model: Literal["simplified", "astral"] = "simplified"
    default_slot_minutes: int = 60
    default_booking_window_days: int = 14
    default_buffer_minutes: int = 0

    model_config = {"env_prefix": "CT_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
