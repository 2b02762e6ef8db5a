"""
Holiday value objects as returned by the Nager.Date API.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Holiday(BaseModel):
    """A single public holiday entry."""

    # Upstream fields we do not model (counties, launchYear) survive re-serialization.
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    date: str
    local_name: str = Field(alias="localName")
    name: str
    country_code: str = Field(alias="countryCode")
    fixed: bool = False
    is_global: bool = Field(default=True, alias="global")
    types: list[str] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize back to the upstream JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class HolidayCheck(BaseModel):
    """Whether today is a public holiday, with its local name when known."""

    is_holiday: bool
    holiday_name: str | None = None
