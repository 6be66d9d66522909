from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from listings_query.infra.db.models.base import Base


class ListingRow(Base):
    __tablename__ = "listings"
    __table_args__ = (
        Index("ix_listings_market_published_at", "market", "published_at"),
        Index("ix_listings_lat_lon", "latitude", "longitude"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    market: Mapped[str] = mapped_column(String(20), nullable=False)  # "listing", "advisor", "cpa"
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    user_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)

    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(9, 6), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(9, 6), nullable=True)

    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    wizard_status: Mapped[str | None] = mapped_column(String(30), nullable=True)
    membership: Mapped[str | None] = mapped_column(String(30), nullable=True)
    interest_options: Mapped[list[str]] = mapped_column(
        ARRAY(String(50)), nullable=False, default=list
    )

    # Advisor and CPA practices
    percent_fee: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)

    # Advisor practices
    aum: Mapped[Decimal | None] = mapped_column(Numeric(16, 2), nullable=True)
    gdc: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    clearing_firm: Mapped[str | None] = mapped_column(String(100), nullable=True)
    broker_dealer: Mapped[str | None] = mapped_column(String(100), nullable=True)
    advisor_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # CPA practices
    revenue: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    services: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)
    credentials: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)
    cpa_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
