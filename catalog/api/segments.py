"""
Segments API endpoints - filter the catalog with text conditions
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.products import ProductResponse
from catalog.database import get_db
from catalog.exceptions import StoreQueryFailed
from catalog.services.segment_compiler import compile_conditions
from catalog.services.segment_service import query_segment

router = APIRouter()


class EvaluateSegmentsRequest(BaseModel):
    conditions: str


class SegmentsResponse(BaseModel):
    conditions: str
    clauses: List[str]
    count: int
    products: List[ProductResponse]


@router.post("/evaluate", response_model=SegmentsResponse)
async def evaluate_segments(
    body: EvaluateSegmentsRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Filter products with keywords like "on sale", "in stock", price
    comparisons (price < 50), category:"shoes" and tag:"summer".
    """
    clauses = compile_conditions(body.conditions)
    try:
        products = await query_segment(db, clauses)
    except StoreQueryFailed as e:
        raise HTTPException(status_code=503, detail=e.message)

    return {
        "conditions": body.conditions,
        "clauses": [c.describe() for c in clauses],
        "count": len(products),
        "products": products,
    }
