# pricewatch/filters/normalizers.py

"""Text normalisation for price-list cells (prices, statuses, labels)."""

import re
from decimal import ROUND_HALF_UP, Decimal

from pricewatch.models.product import ProductStatus

_CURRENCY_RE = re.compile(r"\b(?:rp|idr)\b\.?", re.IGNORECASE)

# Optional sign, then a run of digits and separators
_NUMBER_RE = re.compile(r"(-?)\s*(\d[\d.,]*)")

# A trailing separator followed by one or two digits is a decimal marker;
# thousands groups always have three digits.
_DECIMAL_TAIL_RE = re.compile(r"[.,](\d{1,2})$")

_WHITESPACE_RE = re.compile(r"\s+")

_DISTURBANCE_MARKERS: tuple[str, ...] = (
    "gangguan",
    "error",
    "maintenance",
)

_OPEN_MARKERS: tuple[str, ...] = (
    "buka",
    "open",
    "normal",
    "available",
)

# Removed before the open check so "unavailable" never matches "available"
_NEGATED_OPEN_RE = re.compile(r"\bunavailable\b")


def parse_price(text: str | None) -> int | None:
    """Convert a price cell such as ``'Rp 10.000'`` to whole rupiah.

    Currency markers and any text around the first number are
    discarded.  Dots and commas are thousands separators unless the
    last one is followed by exactly one or two digits, in which case it
    is the decimal marker (``'10.000,50'``).  Fractions are rounded
    half-up, so ``'10.000,50'`` becomes ``10001``.

    Returns ``None`` when no digits are present or the amount is
    negative.
    """
    if not text:
        return None
    cleaned = _CURRENCY_RE.sub(" ", text)
    match = _NUMBER_RE.search(cleaned)
    if not match:
        return None
    if match.group(1):
        return None

    token = match.group(2).rstrip(".,")
    fraction = "0"
    tail = _DECIMAL_TAIL_RE.search(token)
    if tail:
        fraction = tail.group(1)
        token = token[: tail.start()]
    integer = token.replace(".", "").replace(",", "")
    if not integer:
        return None

    amount = Decimal(f"{integer}.{fraction}")
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def classify_status(text: str | None) -> ProductStatus:
    """Map a raw status label to a :class:`ProductStatus`.

    Disturbance markers win over open markers.  Text matching neither
    (``'Tutup'``, ``'Ready'``, ``'Unavailable'``) is ``unknown`` and
    treated as unavailable, so an unrecognised label never advertises a
    product as purchasable.
    """
    raw = (text or "").strip()
    lowered = raw.lower()
    if any(marker in lowered for marker in _DISTURBANCE_MARKERS):
        return ProductStatus(text=raw, available=False, status="disturbance")
    lowered = _NEGATED_OPEN_RE.sub(" ", lowered)
    if any(marker in lowered for marker in _OPEN_MARKERS):
        return ProductStatus(text=raw, available=True, status="open")
    return ProductStatus(text=raw, available=False, status="unknown")


def clean_text(text: str | None) -> str:
    """Collapse internal whitespace and strip the ends."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_category(label: str | None) -> str:
    """Uppercase, whitespace-collapsed category label."""
    return clean_text(label).upper()
