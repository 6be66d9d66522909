from listings_query.infra.db.models.listing import ListingRow

__all__ = ["ListingRow"]
