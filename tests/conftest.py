"""
Shared fixtures for the function app tests.
"""

import json
from datetime import date

import httpx
import pytest

from mcp_functions.config import Settings
from mcp_functions.errors import HolidayServiceError
from mcp_functions.holidays.client import HolidayClient
from mcp_functions.holidays.models import Holiday, HolidayCheck

BASE_URL = "https://date.nager.at/api/v3"

MCP_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json, text/event-stream",
}

CHRISTMAS_PL = {
    "date": "2025-12-25",
    "localName": "Boże Narodzenie",
    "name": "Christmas Day",
    "countryCode": "PL",
    "fixed": True,
    "global": True,
    "counties": None,
    "launchYear": None,
    "types": ["Public"],
}

NEW_YEAR_PL = {
    "date": "2026-01-01",
    "localName": "Nowy Rok",
    "name": "New Year's Day",
    "countryCode": "PL",
    "fixed": True,
    "global": True,
    "types": ["Public"],
}


def jsonrpc(id: int, method: str, params: dict | None = None) -> dict:
    return {"jsonrpc": "2.0", "id": id, "method": method, "params": params or {}}


def parse_sse(raw: str) -> dict | None:
    """Return the first JSON-RPC message of an SSE body (or a plain JSON body)."""
    for line in raw.splitlines():
        if line.startswith("data: "):
            return json.loads(line[len("data: ") :])
    try:
        return json.loads(raw)
    except ValueError:
        return None


class UpstreamStub:
    """Routes upstream paths to canned responses and records every call."""

    def __init__(self, routes: dict[str, httpx.Response | Exception] | None = None):
        self.routes = routes or {}
        self.calls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode("ascii").removeprefix("/api/v3/")
        self.calls.append(path)
        outcome = self.routes.get(path)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return httpx.Response(404)
        return outcome


class FakeHolidayClient:
    """In-memory holiday client recording the calls made by the tools."""

    def __init__(self, holidays=None, check: HolidayCheck | None = None, error: HolidayServiceError | None = None):
        self.holidays = [Holiday.model_validate(h) for h in (holidays or [])]
        self.check = check or HolidayCheck(is_holiday=False)
        self.error = error
        self.calls: list[tuple] = []

    async def get_upcoming_holidays(self, country):
        self.calls.append(("upcoming", country))
        if self.error:
            raise self.error
        return self.holidays

    async def get_holidays_by_year(self, year, country):
        self.calls.append(("by_year", year, country))
        if self.error:
            raise self.error
        return self.holidays

    async def is_today_holiday(self, country):
        self.calls.append(("today", country))
        if self.error:
            raise self.error
        return self.check


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def holiday_client(upstream):
    """Holiday client talking to the upstream stub, with today fixed at 2025-12-25."""
    return HolidayClient(base_url=BASE_URL, transport=httpx.MockTransport(upstream), today=lambda: date(2025, 12, 25))


@pytest.fixture
def fake_client():
    return FakeHolidayClient(holidays=[CHRISTMAS_PL, NEW_YEAR_PL])


@pytest.fixture
def settings():
    return Settings(function_key=None, route_prefix="")
