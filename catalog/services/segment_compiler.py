"""
Segment condition compiler.

Turns free text such as ``on sale price < 50 category:"shoes"`` into clauses
over Product columns. Recognised triggers are independent and AND-ed together;
anything else in the text is ignored, so compiling never fails.

    "on sale" / "sale"             -> on_sale = true
    "in stock" / "instock"         -> stock_status = instock
    "out of stock" / "outofstock"  -> stock_status = outofstock
    price <op> <number>            -> price <op> number   (op: < > <= >= =)
    category:"value"               -> category contains value (case-insensitive)
    tag:"value"                    -> tags contains value (case-insensitive)

Only the first price, category and tag expression is used. Contradicting
triggers ("in stock out of stock") are kept and simply match nothing.
"""
import operator
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

from catalog.models.product import Product, StockStatus


class Comparator(str, Enum):
    EQ = "="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    CONTAINS = "contains"


@dataclass(frozen=True)
class Clause:
    field: str
    comparator: Comparator
    value: Any

    def describe(self) -> str:
        value = self.value.value if isinstance(self.value, Enum) else self.value
        return f"{self.field} {self.comparator.value} {value}"


# Matched operator text -> comparator. Anything else is rejected.
PRICE_OPERATORS = {
    "<": Comparator.LT,
    ">": Comparator.GT,
    "<=": Comparator.LE,
    ">=": Comparator.GE,
    "=": Comparator.EQ,
}

SALE_TRIGGERS = ("on sale", "sale")
IN_STOCK_TRIGGERS = ("in stock", "instock")
OUT_OF_STOCK_TRIGGERS = ("out of stock", "outofstock")

PRICE_PATTERN = re.compile(r"price\s*(<=|>=|<|>|=)\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
CATEGORY_PATTERN = re.compile(r"category\s*[:=]\s*[\"']?([^\"'\s]+)[\"']?", re.IGNORECASE)
TAG_PATTERN = re.compile(r"tag\s*[:=]\s*[\"']?([^\"'\s]+)[\"']?", re.IGNORECASE)


def _contains_any(text: str, triggers: tuple[str, ...]) -> bool:
    return any(trigger in text for trigger in triggers)


def compile_conditions(text: str | None) -> tuple[Clause, ...]:
    """Compile condition text into an ordered tuple of clauses"""
    if not text or not text.strip():
        return ()

    lowered = text.lower()
    clauses: list[Clause] = []

    if _contains_any(lowered, SALE_TRIGGERS):
        clauses.append(Clause("on_sale", Comparator.EQ, True))

    if _contains_any(lowered, IN_STOCK_TRIGGERS):
        clauses.append(Clause("stock_status", Comparator.EQ, StockStatus.INSTOCK))

    if _contains_any(lowered, OUT_OF_STOCK_TRIGGERS):
        clauses.append(Clause("stock_status", Comparator.EQ, StockStatus.OUTOFSTOCK))

    price_match = PRICE_PATTERN.search(text)
    if price_match:
        comparator = PRICE_OPERATORS.get(price_match.group(1))
        if comparator is not None:
            clauses.append(Clause("price", comparator, Decimal(price_match.group(2))))

    category_match = CATEGORY_PATTERN.search(text)
    if category_match:
        clauses.append(Clause("category", Comparator.CONTAINS, category_match.group(1)))

    tag_match = TAG_PATTERN.search(text)
    if tag_match:
        clauses.append(Clause("tags", Comparator.CONTAINS, tag_match.group(1)))

    return tuple(clauses)


_COMPARISONS = {
    Comparator.EQ: operator.eq,
    Comparator.LT: operator.lt,
    Comparator.GT: operator.gt,
    Comparator.LE: operator.le,
    Comparator.GE: operator.ge,
}

# Columns a clause may target
_FIELDS = {
    "on_sale": Product.on_sale,
    "stock_status": Product.stock_status,
    "price": Product.price,
    "category": Product.category,
    "tags": Product.tags,
}


def render_clause(clause: Clause) -> ColumnElement:
    """Render one clause as a SQLAlchemy boolean expression on Product"""
    try:
        column = _FIELDS[clause.field]
    except KeyError:
        raise ValueError(f"Unknown segment field: {clause.field}") from None

    if clause.comparator is Comparator.CONTAINS:
        return column.icontains(str(clause.value), autoescape=True)
    return _COMPARISONS[clause.comparator](column, clause.value)


def render_conditions(clauses: tuple[Clause, ...]) -> ColumnElement:
    """AND together all clauses; no clauses means no restriction"""
    if not clauses:
        return true()
    return and_(*(render_clause(c) for c in clauses))
