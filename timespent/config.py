from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from dotenv import load_dotenv


class ConfigError(ValueError):
    """Raised when required configuration is missing."""


@dataclass(frozen=True)
class DateRange:
    date_from: date
    date_to: date


@dataclass(frozen=True)
class Settings:
    auth_token: str
    api_url: str
    class_ids: tuple[str, ...]
    date_range: DateRange
    report_timezone: str = "Asia/Kolkata"
    output_file: str = "class_timespent.xlsx"
    request_timeout: float = 30.0


_ENV_LOADED = False


def _load_env_once() -> None:
    global _ENV_LOADED
    if not _ENV_LOADED:
        load_dotenv()
        _ENV_LOADED = True


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


def _optional_date(name: str, default: str) -> date:
    raw = os.getenv(name, "").strip() or default
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name} must be a YYYY-MM-DD date when set") from exc


def _optional_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name} must be a number when set") from exc


def read_class_ids(path: str | Path) -> tuple[str, ...]:
    """One identifier per line; blank lines and ``#`` comments are skipped, order and duplicates kept."""
    class_ids_path = Path(path)
    try:
        lines = class_ids_path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError as exc:
        raise ConfigError(f"Class id list not found: {class_ids_path}") from exc

    class_ids = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        class_ids.append(stripped)
    return tuple(class_ids)


def load_settings() -> Settings:
    _load_env_once()

    date_range = DateRange(
        date_from=_optional_date("DATE_FROM", "2025-08-10"),
        date_to=_optional_date("DATE_TO", "2025-08-16"),
    )
    if date_range.date_from > date_range.date_to:
        raise ConfigError("DATE_FROM must not be after DATE_TO")

    # Token goes out verbatim, so only presence is checked.
    auth_token = os.getenv("AUTH_TOKEN", "")
    if not auth_token.strip():
        raise ConfigError("Missing required environment variable: AUTH_TOKEN")

    return Settings(
        auth_token=auth_token,
        api_url=_require("TIMESPENT_API_URL"),
        class_ids=read_class_ids(os.getenv("CLASS_IDS_FILE", "").strip() or "class_ids.txt"),
        date_range=date_range,
        report_timezone=os.getenv("REPORT_TIMEZONE", "Asia/Kolkata").strip() or "Asia/Kolkata",
        output_file=os.getenv("OUTPUT_FILE", "class_timespent.xlsx").strip() or "class_timespent.xlsx",
        request_timeout=_optional_float("REQUEST_TIMEOUT", 30.0),
    )


def ensure_directories() -> None:
    Path("logs").mkdir(parents=True, exist_ok=True)
