"""Persian display helpers for prices, digits and enum labels."""

import math
from typing import Optional, Union

PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"
PERSIAN_THOUSANDS_SEPARATOR = "٬"
PERSIAN_DECIMAL_SEPARATOR = "٫"

NEGOTIABLE = "توافقی"
TOMAN = "تومان"
BILLION = "میلیارد"
MILLION = "میلیون"

_TO_PERSIAN = str.maketrans("0123456789", PERSIAN_DIGITS)
_TO_LATIN = str.maketrans(PERSIAN_DIGITS + ARABIC_DIGITS, "0123456789" * 2)

PROPERTY_TYPE_LABELS = {
    "apartment": "آپارتمان",
    "house": "خانه",
    "villa": "ویلا",
    "land": "زمین",
    "commercial": "تجاری",
}

LISTING_TYPE_LABELS = {
    "sale": "فروش",
    "rent": "اجاره",
    "partnership": "مشارکت در ساخت",
}

STATUS_LABELS = {
    "available": "موجود",
    "pending": "در انتظار",
    "sold": "فروخته شده",
    "off_market": "خارج از بازار",
}

_LABELS = {
    "property_type": PROPERTY_TYPE_LABELS,
    "listing_type": LISTING_TYPE_LABELS,
    "status": STATUS_LABELS,
}


def to_persian_digits(text: str) -> str:
    return text.translate(_TO_PERSIAN)


def to_latin_digits(text: str) -> str:
    return text.translate(_TO_LATIN)


def label_for(kind: str, value) -> str:
    """Persian label for a property_type, listing_type or status value."""
    raw = getattr(value, "value", value)
    return _LABELS.get(kind, {}).get(raw, raw)


def format_number(value: float) -> str:
    """Group digits the way fa-IR number formatting does."""
    if value == int(value):
        text = f"{int(value):,}"
    else:
        text = f"{value:,.3f}".rstrip("0").rstrip(".")
    text = text.replace(",", PERSIAN_THOUSANDS_SEPARATOR).replace(".", PERSIAN_DECIMAL_SEPARATOR)
    return to_persian_digits(text)


def format_price(price: Optional[Union[str, int, float]], compact: bool = False) -> str:
    """Render a listing price for display.

    Missing prices read as negotiable. ``compact`` abbreviates to
    billions/millions as the catalog cards do.
    """
    if price is None or price == "":
        return NEGOTIABLE

    try:
        numeric = float(price)
    except (TypeError, ValueError):
        return str(price)
    if not math.isfinite(numeric):
        return str(price)

    if compact:
        if numeric >= 1_000_000_000:
            return f"{numeric / 1_000_000_000:.1f} {BILLION} {TOMAN}"
        if numeric >= 1_000_000:
            return f"{numeric / 1_000_000:.0f} {MILLION} {TOMAN}"

    return f"{format_number(numeric)} {TOMAN}"


def to_wire_number(value: Optional[Union[int, float]]) -> Optional[str]:
    """String form of a number, without a trailing .0 for whole values."""
    if value is None:
        return None
    if float(value).is_integer():
        return str(int(value))
    return str(value)
