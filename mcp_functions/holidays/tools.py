"""
Holiday MCP tools.

Three tools (upcoming, is-today, by-year) reachable through two call shapes:
- native tool trigger: arguments arrive in the trigger metadata bag
  (ctx["trigger_metadata"]["mcptoolargs"]) and the result is JSON text
- fallback tool call: a generic object carrying the fields at top level,
  under "params" or under "input"; the result is a status/body envelope

Both shapes share the operations below and differ only in presentation.
"""

import logging
import math
from typing import Any

from ..config import Settings, get_settings
from ..errors import ErrorKind, HolidayServiceError, ToolResult, to_http_envelope, to_trigger_payload
from .client import HolidayClient

logger = logging.getLogger(__name__)

COUNTRY_CODE_REQUIRED = "country_code required"
YEAR_AND_COUNTRY_CODE_REQUIRED = "year and country_code required"

_COUNTRY_CODE_PROPERTY = {"type": "string", "description": "ISO 3166-1 alpha-2 country code, e.g. PL"}


def default_client(settings: Settings | None = None) -> HolidayClient:
    """Holiday client configured from the given settings, or the process-wide ones."""
    settings = settings or get_settings()
    return HolidayClient(base_url=settings.holidays_api_base_url, timeout=settings.holidays_api_timeout)


# --------------------------------------------------------------------------- #
# Argument extraction
# --------------------------------------------------------------------------- #


def extract_argument(source: Any, field: str) -> Any:
    """
    Look up a tool argument in a loosely shaped invocation object.

    Tries source[field], source["params"][field], source["input"][field];
    the first non-empty value wins.
    """
    if not isinstance(source, dict):
        return None

    for candidate in (source, source.get("params"), source.get("input")):
        if isinstance(candidate, dict):
            value = candidate.get(field)
            if value:
                return value
    return None


def extract_country_code(source: Any) -> str:
    """Upper-cased country code, or an empty string when absent."""
    value = extract_argument(source, "country_code")
    if not value:
        return ""
    return str(value).upper()


def extract_year(source: Any) -> int | None:
    """Numeric year, or None when absent, zero or not a whole number."""
    value = extract_argument(source, "year")
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number == 0 or not number.is_integer():
        return None
    return int(number)


# --------------------------------------------------------------------------- #
# Operations
# --------------------------------------------------------------------------- #


async def upcoming_holidays(client: HolidayClient, source: Any) -> ToolResult:
    """Next public holidays for the requested country."""
    country = extract_country_code(source)
    if not country:
        return ToolResult.failure(ErrorKind.INVALID_ARGUMENT, COUNTRY_CODE_REQUIRED)

    try:
        holidays = await client.get_upcoming_holidays(country)
    except HolidayServiceError as e:
        logger.warning(f"get_upcoming_holidays failed for {country}: {e}")
        return ToolResult.from_exception(e)

    return ToolResult.success([h.to_payload() for h in holidays])


async def today_holiday(client: HolidayClient, source: Any) -> ToolResult:
    """Sentence telling whether today is a public holiday in the requested country."""
    country = extract_country_code(source)
    if not country:
        return ToolResult.failure(ErrorKind.INVALID_ARGUMENT, COUNTRY_CODE_REQUIRED)

    try:
        check = await client.is_today_holiday(country)
    except HolidayServiceError as e:
        logger.warning(f"is_today_holiday failed for {country}: {e}")
        return ToolResult.from_exception(e)

    if check.is_holiday:
        message = f"Yes, today is {check.holiday_name or 'a public holiday'} in {country}."
    else:
        message = f"No, today is not a public holiday in {country}."
    return ToolResult.success({"message": message})


async def holidays_by_year(client: HolidayClient, source: Any) -> ToolResult:
    """All public holidays of the requested country and year."""
    country = extract_country_code(source)
    year = extract_year(source)
    if not country or not year:
        return ToolResult.failure(ErrorKind.INVALID_ARGUMENT, YEAR_AND_COUNTRY_CODE_REQUIRED)

    try:
        holidays = await client.get_holidays_by_year(year, country)
    except HolidayServiceError as e:
        logger.warning(f"get_holidays_by_year failed for {country}/{year}: {e}")
        return ToolResult.from_exception(e)

    return ToolResult.success([h.to_payload() for h in holidays])


# --------------------------------------------------------------------------- #
# Native tool trigger
# --------------------------------------------------------------------------- #


def trigger_arguments(ctx: dict[str, Any]) -> dict[str, Any]:
    """Argument bag attached to a native tool invocation."""
    metadata = ctx.get("trigger_metadata") or {}
    return metadata.get("mcptoolargs") or {}


def create_trigger_handler(operation, client: HolidayClient):
    """Create a native tool-trigger handler bound to a client."""

    async def handler(ctx: dict[str, Any], **_tool_arguments) -> str:
        result = await operation(client, trigger_arguments(ctx))
        return to_trigger_payload(result)

    return handler


def get_holiday_tools(client: HolidayClient | None = None) -> list[dict[str, Any]]:
    """Holiday tool definitions for the MCP tool trigger binding."""
    client = client or default_client()

    return [
        {
            "name": "get_upcoming_holidays",
            "description": (
                "Returns the next upcoming public holidays for a given country. "
                "Use ISO 3166-1 alpha-2 country code (e.g. PL, US, DE)."
            ),
            "input_schema": {"type": "object", "properties": {"country_code": _COUNTRY_CODE_PROPERTY}},
            "handler": create_trigger_handler(upcoming_holidays, client),
        },
        {
            "name": "is_today_holiday",
            "description": "Checks whether today is a public holiday in the specified country.",
            "input_schema": {"type": "object", "properties": {"country_code": _COUNTRY_CODE_PROPERTY}},
            "handler": create_trigger_handler(today_holiday, client),
        },
        {
            "name": "get_holidays_by_year",
            "description": "Returns all public holidays for a given country and year.",
            "input_schema": {
                "type": "object",
                "properties": {
                    "country_code": _COUNTRY_CODE_PROPERTY,
                    "year": {"type": "string", "description": "Four-digit year, e.g. 2025"},
                },
            },
            "handler": create_trigger_handler(holidays_by_year, client),
        },
    ]


# --------------------------------------------------------------------------- #
# Fallback tool calls
# --------------------------------------------------------------------------- #


async def tool_get_upcoming_holidays(
    tool_input: Any, client: HolidayClient | None = None, settings: Settings | None = None
) -> dict[str, Any]:
    """Fallback invocation of get_upcoming_holidays."""
    return to_http_envelope(await upcoming_holidays(client or default_client(settings), tool_input))


async def tool_is_today_holiday(
    tool_input: Any, client: HolidayClient | None = None, settings: Settings | None = None
) -> dict[str, Any]:
    """Fallback invocation of is_today_holiday."""
    return to_http_envelope(await today_holiday(client or default_client(settings), tool_input))


async def tool_get_holidays_by_year(
    tool_input: Any, client: HolidayClient | None = None, settings: Settings | None = None
) -> dict[str, Any]:
    """Fallback invocation of get_holidays_by_year."""
    return to_http_envelope(await holidays_by_year(client or default_client(settings), tool_input))
