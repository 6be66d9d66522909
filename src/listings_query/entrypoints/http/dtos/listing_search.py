from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ListingResponseDTO(BaseModel):
    """A listing as returned by the search endpoint. Decimals are strings."""

    id: int
    market: str
    title: str
    user_id: int | None = None
    location: str | None = None
    latitude: str | None = None
    longitude: str | None = None
    published: bool
    published_at: datetime | None = None
    wizard_status: str | None = None
    membership: str | None = None
    interest_options: list[str] = Field(default_factory=list)
    percent_fee: str | None = None
    aum: str | None = None
    gdc: str | None = None
    clearing_firm: str | None = None
    broker_dealer: str | None = None
    advisor_id: int | None = None
    revenue: str | None = None
    services: list[str] = Field(default_factory=list)
    credentials: list[str] = Field(default_factory=list)
    cpa_id: int | None = None


class ListingSearchResponseDTO(BaseModel):
    listings: list[ListingResponseDTO]
    total: int
    market: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "listings": [
                    {
                        "id": 42,
                        "market": "advisor",
                        "title": "Fee-based practice, Denver",
                        "location": "Denver, CO",
                        "published": True,
                        "percent_fee": "1.00",
                        "aum": "85000000.00",
                    }
                ],
                "total": 1,
                "market": "advisor",
            }
        }
    )
