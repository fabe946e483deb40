"""
General helper utilities
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

ZERO = Decimal("0")


def parse_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Parse a price-like value ("19.99", 19.99, "") into a finite Decimal"""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    if not result.is_finite():
        return default
    return result


def parse_int(value: Any, default: int = 0) -> int:
    """Parse a quantity-like value, falling back to default"""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    # "12.0" and similar
    parsed = parse_decimal(value, default=None)
    if parsed is None:
        return default
    return int(parsed)


def join_names(names: Iterable[str], separator: str = ", ") -> str:
    """Join non-blank names in their original order"""
    return separator.join(n.strip() for n in names if n and n.strip())
