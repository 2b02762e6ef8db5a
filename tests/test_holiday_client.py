"""
Tests for the Nager.Date holiday client.
"""

import httpx
import pytest
from conftest import CHRISTMAS_PL, NEW_YEAR_PL

from mcp_functions.errors import CheckFailed, ErrorKind, InvalidCountryCode, UpstreamUnavailable
from mcp_functions.holidays.client import HolidayClient


class TestUpcomingHolidays:
    """Tests for get_upcoming_holidays."""

    @pytest.mark.asyncio
    async def test_returns_holidays(self, holiday_client, upstream):
        """Should parse the upstream list into holidays."""
        upstream.routes["NextPublicHolidays/PL"] = httpx.Response(200, json=[CHRISTMAS_PL, NEW_YEAR_PL])

        holidays = await holiday_client.get_upcoming_holidays("PL")

        assert [h.local_name for h in holidays] == ["Boże Narodzenie", "Nowy Rok"]
        assert holidays[0].is_global is True
        assert holidays[0].types == ["Public"]

    @pytest.mark.asyncio
    async def test_payload_keeps_upstream_shape(self, holiday_client, upstream):
        """Should serialize back with the upstream field names."""
        upstream.routes["NextPublicHolidays/PL"] = httpx.Response(200, json=[CHRISTMAS_PL])

        holidays = await holiday_client.get_upcoming_holidays("PL")
        payload = holidays[0].to_payload()

        assert payload["localName"] == "Boże Narodzenie"
        assert payload["countryCode"] == "PL"
        assert payload["global"] is True
        assert payload["date"] == "2025-12-25"

    @pytest.mark.asyncio
    async def test_404_is_invalid_country_code(self, holiday_client, upstream):
        """Should map 404 to InvalidCountryCode."""
        upstream.routes["NextPublicHolidays/XX"] = httpx.Response(404)

        with pytest.raises(InvalidCountryCode) as exc_info:
            await holiday_client.get_upcoming_holidays("XX")

        assert "ISO 3166-1 alpha-2" in str(exc_info.value)
        assert exc_info.value.kind == ErrorKind.INVALID_COUNTRY_CODE

    @pytest.mark.asyncio
    async def test_server_error_is_upstream_unavailable(self, holiday_client, upstream):
        """Should map other error statuses to UpstreamUnavailable."""
        upstream.routes["NextPublicHolidays/PL"] = httpx.Response(503)

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await holiday_client.get_upcoming_holidays("PL")

        assert str(exc_info.value).startswith("Failed to fetch upcoming holidays: ")

    @pytest.mark.asyncio
    async def test_timeout_is_upstream_unavailable(self, holiday_client, upstream):
        """Should map transport failures to UpstreamUnavailable."""
        upstream.routes["NextPublicHolidays/PL"] = httpx.ConnectTimeout("timed out")

        with pytest.raises(UpstreamUnavailable, match="timed out"):
            await holiday_client.get_upcoming_holidays("PL")

    @pytest.mark.asyncio
    async def test_country_code_is_url_encoded(self, holiday_client, upstream):
        """Should not let the country code escape its path segment."""
        upstream.routes["NextPublicHolidays/P%2FL"] = httpx.Response(200, json=[])

        await holiday_client.get_upcoming_holidays("P/L")

        assert upstream.calls == ["NextPublicHolidays/P%2FL"]

    def test_default_timeout(self):
        """Should default to a five second timeout."""
        assert HolidayClient().timeout == 5.0


class TestHolidaysByYear:
    """Tests for get_holidays_by_year."""

    @pytest.mark.asyncio
    async def test_returns_only_requested_country(self, holiday_client, upstream):
        """Should drop entries belonging to another country."""
        foreign = dict(CHRISTMAS_PL, countryCode="DE", localName="Weihnachtstag")
        upstream.routes["PublicHolidays/2025/PL"] = httpx.Response(200, json=[CHRISTMAS_PL, foreign])

        holidays = await holiday_client.get_holidays_by_year(2025, "PL")

        assert [h.country_code for h in holidays] == ["PL"]

    @pytest.mark.asyncio
    async def test_404_is_invalid_country_code_or_year(self, holiday_client, upstream):
        """Should map 404 to InvalidCountryCode mentioning the year."""
        with pytest.raises(InvalidCountryCode, match="Invalid country code or year"):
            await holiday_client.get_holidays_by_year(1, "PL")

    @pytest.mark.asyncio
    async def test_malformed_body_is_upstream_unavailable(self, holiday_client, upstream):
        """Should reject bodies that are not a holiday list."""
        upstream.routes["PublicHolidays/2025/PL"] = httpx.Response(200, json={"unexpected": True})

        with pytest.raises(UpstreamUnavailable, match="Failed to fetch holidays by year"):
            await holiday_client.get_holidays_by_year(2025, "PL")


class TestIsTodayHoliday:
    """Tests for is_today_holiday."""

    @pytest.mark.asyncio
    async def test_200_with_named_holiday(self, holiday_client, upstream):
        """Should use the local name from the body."""
        upstream.routes["IsTodayPublicHoliday/PL"] = httpx.Response(200, json=[CHRISTMAS_PL])

        check = await holiday_client.is_today_holiday("PL")

        assert check.is_holiday is True
        assert check.holiday_name == "Boże Narodzenie"

    @pytest.mark.asyncio
    async def test_200_with_empty_body(self, holiday_client, upstream):
        """Should report a holiday without a name."""
        upstream.routes["IsTodayPublicHoliday/PL"] = httpx.Response(200)

        check = await holiday_client.is_today_holiday("PL")

        assert check.is_holiday is True
        assert check.holiday_name is None

    @pytest.mark.asyncio
    async def test_200_with_non_string_name(self, holiday_client, upstream):
        """Should render an unexpected name type as text."""
        upstream.routes["IsTodayPublicHoliday/PL"] = httpx.Response(200, json=[{"localName": 123}])

        check = await holiday_client.is_today_holiday("PL")

        assert check.is_holiday is True
        assert check.holiday_name == "123"

    @pytest.mark.asyncio
    async def test_204_is_not_a_holiday(self, holiday_client, upstream):
        """Should report no holiday on 204."""
        upstream.routes["IsTodayPublicHoliday/PL"] = httpx.Response(204)

        check = await holiday_client.is_today_holiday("PL")

        assert check.is_holiday is False
        assert upstream.calls == ["IsTodayPublicHoliday/PL"]

    @pytest.mark.asyncio
    async def test_fallback_finds_todays_entry(self, holiday_client, upstream):
        """Should find the same entry the yearly list shows for today."""
        upstream.routes["IsTodayPublicHoliday/PL"] = httpx.Response(500)
        upstream.routes["PublicHolidays/2025/PL"] = httpx.Response(200, json=[CHRISTMAS_PL, NEW_YEAR_PL])

        check = await holiday_client.is_today_holiday("PL")
        yearly = await holiday_client.get_holidays_by_year(2025, "PL")

        todays = [h for h in yearly if h.date == "2025-12-25"]
        assert check.is_holiday is True
        assert check.holiday_name == todays[0].local_name
        assert upstream.calls[:2] == ["IsTodayPublicHoliday/PL", "PublicHolidays/2025/PL"]

    @pytest.mark.asyncio
    async def test_fallback_without_match(self, holiday_client, upstream):
        """Should report no holiday when today is not in the yearly list."""
        upstream.routes["IsTodayPublicHoliday/PL"] = httpx.Response(503)
        upstream.routes["PublicHolidays/2025/PL"] = httpx.Response(200, json=[NEW_YEAR_PL])

        check = await holiday_client.is_today_holiday("PL")

        assert check.is_holiday is False

    @pytest.mark.asyncio
    async def test_fallback_failure_is_check_failed(self, holiday_client, upstream):
        """Should wrap a failing yearly fallback in CheckFailed."""
        upstream.routes["IsTodayPublicHoliday/XX"] = httpx.Response(400)

        with pytest.raises(CheckFailed, match="Failed to check today holiday: Invalid country code or year"):
            await holiday_client.is_today_holiday("XX")

    @pytest.mark.asyncio
    async def test_network_failure_is_check_failed(self, holiday_client, upstream):
        """Should map transport failures to CheckFailed."""
        upstream.routes["IsTodayPublicHoliday/PL"] = httpx.ConnectError("connection refused")

        with pytest.raises(CheckFailed) as exc_info:
            await holiday_client.is_today_holiday("PL")

        assert exc_info.value.kind == ErrorKind.CHECK_FAILED
