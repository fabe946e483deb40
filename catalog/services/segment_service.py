"""
Segment evaluation - runs compiled segment conditions against the products table
"""
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.exceptions import StoreQueryFailed
from catalog.models.product import Product
from catalog.services.segment_compiler import Clause, compile_conditions, render_conditions
from catalog.utils.logger import get_logger

logger = get_logger(__name__)


def build_segment_query(clauses: tuple[Clause, ...]):
    query = select(Product)
    if clauses:
        query = query.where(render_conditions(clauses))
    return query.order_by(Product.id)


async def query_segment(db: AsyncSession, clauses: tuple[Clause, ...]) -> list[Product]:
    """Return every product matching all of the given clauses"""
    try:
        result = await db.execute(build_segment_query(clauses))
    except SQLAlchemyError as e:
        raise StoreQueryFailed(f"Failed to evaluate segment: {e}") from e
    return list(result.scalars().all())


async def evaluate_segment(db: AsyncSession, conditions: str) -> list[Product]:
    """
    Return every product matching all clauses found in the condition text.
    Blank or unrecognised text matches the whole catalog.
    """
    clauses = compile_conditions(conditions)
    logger.debug(f"Segment {conditions!r} compiled to {[c.describe() for c in clauses]}")
    return await query_segment(db, clauses)
