#!/usr/bin/env python3
"""
Seed the listings table with deterministic sample practices.

Features:
- Deterministic: fixed seed → same dataset every run
- Idempotent: safe to run multiple times (clears before seeding)
- Covers all markets: generic listings, advisor and CPA practices

Usage:
    python scripts/seed_listings.py
"""

from __future__ import annotations

import random
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from listings_query.infra.db.models.listing import ListingRow
from listings_query.infra.db.session import get_session


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42
NUM_LISTINGS = 60
NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)

MARKETS = ["listing", "advisor", "cpa"]

# (city, latitude, longitude)
CITIES = [
    ("Denver, CO", Decimal("39.739236"), Decimal("-104.990251")),
    ("Austin, TX", Decimal("30.267153"), Decimal("-97.743057")),
    ("Boston, MA", Decimal("42.360081"), Decimal("-71.058884")),
    ("Charlotte, NC", Decimal("35.227085"), Decimal("-80.843124")),
    ("Phoenix, AZ", Decimal("33.448376"), Decimal("-112.074036")),
    ("Seattle, WA", Decimal("47.606209"), Decimal("-122.332071")),
]

INTEREST_OPTIONS = ["acquisition", "merger", "succession", "partnership"]
WIZARD_STATUSES = ["draft", "details", "financials", "complete"]
MEMBERSHIPS = ["basic", "premium"]
CLEARING_FIRMS = ["Pershing", "Fidelity", "Schwab", "LPL"]
BROKER_DEALERS = ["Raymond James", "Ameriprise", "Cetera", "Commonwealth"]
SERVICES = ["tax", "audit", "bookkeeping", "payroll", "advisory"]
CREDENTIALS = ["CPA", "EA", "CFP", "CMA"]


# ==============================================================================
# Seed Generation
# ==============================================================================


def generate_listing(index: int) -> ListingRow:
    """Generate a single practice listing with market-specific fields."""
    market = MARKETS[index % len(MARKETS)]
    city, latitude, longitude = random.choice(CITIES)
    published = random.random() < 0.85

    row = ListingRow(
        market=market,
        title=f"{market.capitalize()} practice #{index + 1} in {city}",
        user_id=random.randint(1, 12),
        location=city,
        latitude=latitude,
        longitude=longitude,
        published=published,
        published_at=NOW - timedelta(days=random.randint(0, 365)) if published else None,
        wizard_status="complete" if published else random.choice(WIZARD_STATUSES),
        membership=random.choice(MEMBERSHIPS),
        interest_options=random.sample(INTEREST_OPTIONS, k=random.randint(1, 2)),
        services=[],
        credentials=[],
    )

    if market in ("advisor", "cpa"):
        row.percent_fee = Decimal(random.choice(["0.75", "1.00", "1.25", "1.50", "2.00"]))

    if market == "advisor":
        row.aum = Decimal(random.randint(10, 500) * 1_000_000)
        row.gdc = Decimal(random.randint(100, 3000) * 1_000)
        row.clearing_firm = random.choice(CLEARING_FIRMS)
        row.broker_dealer = random.choice(BROKER_DEALERS)
        row.advisor_id = 1000 + index
    elif market == "cpa":
        row.revenue = Decimal(random.randint(200, 5000) * 1_000)
        row.services = random.sample(SERVICES, k=random.randint(1, 3))
        row.credentials = random.sample(CREDENTIALS, k=random.randint(1, 2))
        row.cpa_id = 2000 + index

    return row


def seed_listings(num_listings: int = NUM_LISTINGS, seed: int = RANDOM_SEED) -> None:
    """
    Seed the database with sample listings.

    Args:
        num_listings: Number of listings to generate
        seed: Random seed for deterministic results
    """
    random.seed(seed)

    print(f"Seeding database with {num_listings} listings (seed={seed})...")

    with get_session() as session:
        deleted_count = session.query(ListingRow).delete()
        print(f"   Deleted {deleted_count} existing listings")

        listings = [generate_listing(index) for index in range(num_listings)]
        session.add_all(listings)
        # Request sessions roll back on exit; persist explicitly
        session.commit()

        print(f"Seeded {len(listings)} listings")
        for market in MARKETS:
            count = sum(1 for listing in listings if listing.market == market)
            print(f"   {market}: {count}")


# ==============================================================================
# Main
# ==============================================================================


if __name__ == "__main__":
    try:
        seed_listings()
    except Exception as e:
        print(f"Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
