from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def parse_int(value: str | None, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    return int(value)


def parse_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


def normalize_prefix(value: str | None) -> str:
    """
    "" -> "", "pphyo" -> "/pphyo", "/pphyo/" -> "/pphyo"
    """
    if not value:
        return ""
    v = value.strip().strip("/")
    return f"/{v}" if v else ""


def load_env_file(path: str = ".env") -> bool:
    """Reads the local settings file into the process environment, once, before startup."""
    loaded = load_dotenv(path)
    if not loaded:
        logger.warning(f"Settings file {path} not found; using process environment only.")
    return loaded


@dataclass(frozen=True)
class Settings:
    AWS_REGION: str
    TRADE_TABLE_NAME: str
    LOGGLY_TOKEN: Optional[str]
    LOGGLY_TAG: str
    LOGGLY_URL: str
    ROUTE_PREFIX: str
    HOST: str
    PORT: int
    SCAN_TIMEOUT_SECONDS: float
    STATUS_TIMEOUT_SECONDS: float
    LOG_LEVEL: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            AWS_REGION=os.getenv("AWS_REGION", "us-east-1"),
            TRADE_TABLE_NAME=os.getenv("TRADE_TABLE_NAME", "pphyo_ETH_tradeEntries"),
            LOGGLY_TOKEN=os.getenv("LOGGLY_TOKEN") or None,
            LOGGLY_TAG=os.getenv("LOGGLY_TAG", "CSC482Server"),
            LOGGLY_URL=os.getenv("LOGGLY_URL", "https://logs-01.loggly.com/inputs"),
            ROUTE_PREFIX=normalize_prefix(os.getenv("ROUTE_PREFIX")),
            HOST=os.getenv("HOST", "0.0.0.0"),
            PORT=parse_int(os.getenv("PORT"), 8080),
            SCAN_TIMEOUT_SECONDS=parse_float(os.getenv("SCAN_TIMEOUT_SECONDS"), 2.0),
            STATUS_TIMEOUT_SECONDS=parse_float(os.getenv("STATUS_TIMEOUT_SECONDS"), 5.0),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
