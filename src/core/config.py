"""
Runtime configuration.

Values are read from the environment (a local .env file is loaded first, if present).
"""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Self

from dotenv import load_dotenv

load_dotenv()

TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///:memory:"
    # Sessions without any activity for this long may be swept from the store
    session_inactivity_minutes: int = 30
    # The fuki rule is switched on for new sessions unless the creator toggles it off
    default_fuki_mode: bool = True
    # Whether a player may voluntarily stop a capture chain (see DESIGN.md)
    allow_pass_turn: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            session_inactivity_minutes=int(
                os.getenv(
                    "SESSION_INACTIVITY_MINUTES", str(cls.session_inactivity_minutes)
                )
            ),
            default_fuki_mode=_env_flag("DEFAULT_FUKI_MODE", cls.default_fuki_mode),
            allow_pass_turn=_env_flag("ALLOW_PASS_TURN", cls.allow_pass_turn),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )

    @property
    def inactivity_timeout(self) -> timedelta:
        return timedelta(minutes=self.session_inactivity_minutes)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
