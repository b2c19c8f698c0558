"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("hotelbot.config")

_DATE_ORDERS = {"MDY", "DMY", "YMD", "YDM", "MYD", "DYM"}


class Settings(BaseSettings):
    # Storage
    storage_backend: str = "memory"        # "memory" or "file"
    storage_dir: str = "data/state"

    # Date parsing: one fixed rule for day/month ambiguity
    date_order: str = "MDY"
    date_languages: list[str] = ["en"]
    prefer_dates_from: str = "future"

    # Choice matching (rapidfuzz WRatio score, 0-100)
    choice_score_cutoff: float = 80.0

    # Messages
    apology_message: str = "Sorry, something went wrong. Please try again."

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []

        if self.storage_backend not in ("memory", "file"):
            raise ValueError(
                f"STORAGE_BACKEND must be 'memory' or 'file', got {self.storage_backend!r}."
            )

        if self.date_order.upper() not in _DATE_ORDERS:
            raise ValueError(f"DATE_ORDER {self.date_order!r} is not a valid date order.")

        if self.storage_backend == "memory":
            warnings.append(
                "STORAGE_BACKEND=memory: conversation state is lost when the process exits."
            )

        if not 0 < self.choice_score_cutoff <= 100:
            warnings.append(
                f"CHOICE_SCORE_CUTOFF={self.choice_score_cutoff} is outside (0, 100]; "
                "fuzzy choice matching will behave oddly."
            )

        return warnings


settings = Settings()
