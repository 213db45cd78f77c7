"""
Core pagination utilities for API endpoints.
"""
import math
from typing import Generic, List, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as SQLAlchemyQuery

T = TypeVar("T")


class PageParams:
    """
    Page parameters for pagination.

    Attributes:
        page: Page number (1-indexed)
        limit: Number of items per page
    """
    def __init__(
        self,
        page: int = Query(1, ge=1, description="Page number"),
        limit: int = Query(10, ge=1, le=100, description="Items per page"),
    ):
        self.page = page
        self.limit = limit
        self.offset = (page - 1) * limit


class PageResponse(BaseModel, Generic[T]):
    """
    Paginated response model.

    Attributes:
        data: Items of the current page
        total_count: Total number of matching items
        page: Current page number
        limit: Number of items per page
        total_pages: Total number of pages
    """
    data: List[T]
    total_count: int
    page: int
    limit: int
    total_pages: int


def paginate(query: SQLAlchemyQuery, page_params: PageParams, schema_class=None) -> PageResponse:
    """
    Paginate a SQLAlchemy query.

    Args:
        query: SQLAlchemy query to paginate (ordering is the caller's job)
        page_params: Pagination parameters
        schema_class: Optional Pydantic model to convert items to

    Returns:
        PageResponse: Paginated response
    """
    total = query.count()
    items = query.offset(page_params.offset).limit(page_params.limit).all()

    if schema_class:
        items = [schema_class.model_validate(item) for item in items]

    total_pages = math.ceil(total / page_params.limit) if total > 0 else 0

    return PageResponse(
        data=items,
        total_count=total,
        page=page_params.page,
        limit=page_params.limit,
        total_pages=total_pages,
    )
