"""
Async client for the Nager.Date public holiday API.

Every call is a single GET with a fixed timeout; failures are mapped onto
the holiday error taxonomy instead of leaking httpx exceptions.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from ..errors import CheckFailed, HolidayServiceError, InvalidCountryCode, UpstreamUnavailable
from .models import Holiday, HolidayCheck

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://date.nager.at/api/v3"
DEFAULT_TIMEOUT = 5.0

_holiday_list = TypeAdapter(list[Holiday])


def utc_today() -> date:
    """Current UTC calendar date."""
    return datetime.now(timezone.utc).date()


def _reason(exc: Exception) -> str:
    """Readable failure reason (httpx timeouts often carry no message)."""
    return str(exc) or exc.__class__.__name__


class HolidayClient:
    """Thin wrapper around the three holiday endpoints used by the tools."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        today: Callable[[], date] | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Upstream API base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
            today: Clock returning the current calendar date, UTC by default
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.today = today or utc_today

    def _url(self, *segments: str) -> str:
        return "/".join([self.base_url, *(quote(segment, safe="") for segment in segments)])

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            logger.debug(f"GET {url}")
            return await client.get(url)

    async def get_upcoming_holidays(self, country: str) -> list[Holiday]:
        """
        Fetch the next public holidays for a country.

        Raises:
            InvalidCountryCode: upstream answered 404
            UpstreamUnavailable: any other failure
        """
        url = self._url("NextPublicHolidays", country)
        try:
            response = await self._get(url)
            response.raise_for_status()
            return _holiday_list.validate_python(response.json())
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise InvalidCountryCode(
                    "Invalid country code. Please use ISO 3166-1 alpha-2 format (e.g., PL)."
                ) from e
            raise UpstreamUnavailable(f"Failed to fetch upcoming holidays: {_reason(e)}") from e
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.warning(f"Upcoming holidays request failed for {country}: {_reason(e)}")
            raise UpstreamUnavailable(f"Failed to fetch upcoming holidays: {_reason(e)}") from e

    async def get_holidays_by_year(self, year: int, country: str) -> list[Holiday]:
        """
        Fetch all public holidays of a country for one year.

        Only entries belonging to the requested country are returned.

        Raises:
            InvalidCountryCode: upstream answered 404 (bad country or year)
            UpstreamUnavailable: any other failure
        """
        url = self._url("PublicHolidays", str(year), country)
        try:
            response = await self._get(url)
            response.raise_for_status()
            holidays = _holiday_list.validate_python(response.json())
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise InvalidCountryCode("Invalid country code or year. Please check inputs.") from e
            raise UpstreamUnavailable(f"Failed to fetch holidays by year: {_reason(e)}") from e
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.warning(f"Holidays by year request failed for {country}/{year}: {_reason(e)}")
            raise UpstreamUnavailable(f"Failed to fetch holidays by year: {_reason(e)}") from e

        return [h for h in holidays if h.country_code.upper() == country.upper()]

    async def is_today_holiday(self, country: str) -> HolidayCheck:
        """
        Check whether today is a public holiday in a country.

        200 means holiday (named when the body lists one), 204 means no
        holiday. Any other status falls back to searching the current year's
        list for today's date.

        Raises:
            CheckFailed: the request or the yearly fallback failed
        """
        url = self._url("IsTodayPublicHoliday", country)
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            raise CheckFailed(f"Failed to check today holiday: {_reason(e)}") from e

        if response.status_code == 200:
            try:
                data = response.json()
            except ValueError:
                data = None
            if isinstance(data, list) and data and isinstance(data[0], dict) and data[0].get("localName"):
                return HolidayCheck(is_holiday=True, holiday_name=str(data[0]["localName"]))
            return HolidayCheck(is_holiday=True)

        if response.status_code == 204:
            return HolidayCheck(is_holiday=False)

        logger.info(f"IsTodayPublicHoliday answered {response.status_code} for {country}, using yearly list")
        today = self.today()
        try:
            holidays = await self.get_holidays_by_year(today.year, country)
        except HolidayServiceError as e:
            raise CheckFailed(f"Failed to check today holiday: {e}") from e

        match = next((h for h in holidays if h.date == today.isoformat()), None)
        if match:
            return HolidayCheck(is_holiday=True, holiday_name=match.local_name)
        return HolidayCheck(is_holiday=False)
