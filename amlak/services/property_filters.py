"""Translate catalog filter state into listing query parameters."""

from typing import Optional

from amlak.models.property import (
    FormListingType,
    ListingType,
    NO_CONSTRAINT,
    PropertyFilters,
    PropertyStatus,
)
from amlak.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

# Filter fields in query order; True marks fields that use the "all" sentinel
FILTER_FIELDS = (
    ("property_type", True),
    ("listing_type", True),
    ("city", False),
    ("min_area", False),
    ("max_area", False),
    ("min_price", False),
    ("max_price", False),
    ("bedrooms", True),
)


def map_listing_type(value: str) -> str:
    """Collapse form-only listing types onto what the backend stores.

    Partnership listings are stored as sales, so the distinction is lost.
    """
    value = getattr(value, "value", value)
    if value == FormListingType.PARTNERSHIP.value:
        logger.warning(
            "Partnership listing type stored as sale",
            requested_listing_type=value,
            stored_listing_type=ListingType.SALE.value,
        )
        return ListingType.SALE.value
    return value


def _is_constraint(value: Optional[str], uses_sentinel: bool) -> bool:
    if value is None or value == "":
        return False
    if uses_sentinel and value == NO_CONSTRAINT:
        return False
    return True


def build_listing_params(filters: Optional[PropertyFilters] = None) -> dict[str, str]:
    """Query parameters for the public catalog.

    Always restricted to available listings. Other fields are included only
    when set, in FILTER_FIELDS order.
    """
    filters = filters or PropertyFilters()
    params = {"status": PropertyStatus.AVAILABLE.value}

    for field, uses_sentinel in FILTER_FIELDS:
        value = getattr(filters, field)
        if not _is_constraint(value, uses_sentinel):
            continue
        if field == "listing_type":
            value = map_listing_type(value)
        params[field] = value

    return params
