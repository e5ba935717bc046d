from __future__ import annotations

from datetime import date, datetime

import httpx
import pytest

from timespent import config
from timespent.config import DateRange, Settings

FIXED_MOMENT = datetime(2025, 8, 16, 15, 4, 5)
FIXED_TIMESTAMP = "8/16/2025, 3:04:05 PM"
API_URL = "https://analytics.example.test/class/timespent"


def network_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def mock_transport(responses: dict, seen: list | None = None) -> httpx.MockTransport:
    """Routes on the classId query parameter; values are payloads, ``httpx.Response`` objects or handlers."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        result = responses[request.url.params["classId"]]
        if callable(result):
            return result(request)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)

    return httpx.MockTransport(handler)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_MOMENT


@pytest.fixture
def make_settings(tmp_path):
    def _make(class_ids=(), **overrides) -> Settings:
        values = {
            "auth_token": "token-123",
            "api_url": API_URL,
            "class_ids": tuple(class_ids),
            "date_range": DateRange(date_from=date(2025, 8, 10), date_to=date(2025, 8, 16)),
            "output_file": str(tmp_path / "class_timespent.xlsx"),
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Environment for ``load_settings()`` with two class ids and no ``.env`` lookup."""
    monkeypatch.setattr(config, "_ENV_LOADED", True)
    for name in (
        "AUTH_TOKEN",
        "TIMESPENT_API_URL",
        "CLASS_IDS_FILE",
        "DATE_FROM",
        "DATE_TO",
        "REPORT_TIMEZONE",
        "OUTPUT_FILE",
        "REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)

    class_ids_file = tmp_path / "class_ids.txt"
    class_ids_file.write_text("c1\nc2\n", encoding="utf-8")
    monkeypatch.setenv("AUTH_TOKEN", "Bearer abc")
    monkeypatch.setenv("TIMESPENT_API_URL", "https://analytics.example.test/timespent")
    monkeypatch.setenv("CLASS_IDS_FILE", str(class_ids_file))
    return monkeypatch
