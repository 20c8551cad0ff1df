"""
Search Endpoints
GET /api/products/search - Bilingual product search.
GET /api/products/search/debug - Search setup diagnostics.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_catalog_store, get_request_id, get_search_service
from ..errors import InvalidRequestError, SearchError
from ..models.search import DiagnosticsResponse, SearchResponse
from ...search import CatalogStore, ProductSearchService, StoreQueryError, diagnose

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["search"])

MAX_QUERY_LENGTH = 500


@router.get("/search", response_model=SearchResponse, status_code=status.HTTP_200_OK)
def search_products(
    q: Optional[str] = Query(None, description="Search query, Hebrew or English"),
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Page size"),
    service: ProductSearchService = Depends(get_search_service),
    request_id: str = Depends(get_request_id),
) -> SearchResponse:
    """
    Search active products.

    page and limit are taken as raw strings; malformed values fall back to
    page 1 and the default page size instead of failing validation.

    Args:
        q: Search query
        page: Page number
        limit: Page size
        service: Search service
        request_id: Request ID for tracing

    Returns:
        One page of rank-ordered products with the total candidate count
    """
    if q and len(q) > MAX_QUERY_LENGTH:
        raise InvalidRequestError(
            f"Query is too long (max {MAX_QUERY_LENGTH} characters)",
            details={"length": len(q), "request_id": request_id},
        )

    try:
        result = service.search(q, page=page, limit=limit)
    except StoreQueryError as e:
        logger.error(f"Search failed for '{q}': {e.message}", extra={"request_id": request_id})
        raise SearchError("Failed to search products", details={"request_id": request_id})

    return SearchResponse.from_page(result)


@router.get("/search/debug", response_model=DiagnosticsResponse, status_code=status.HTTP_200_OK)
def search_debug(
    store: CatalogStore = Depends(get_catalog_store),
    request_id: str = Depends(get_request_id),
) -> DiagnosticsResponse:
    """
    Report whether the catalog is set up for full-text search.
    """
    try:
        report = diagnose(store)
    except StoreQueryError as e:
        logger.error(f"Search diagnostics failed: {e.message}", extra={"request_id": request_id})
        raise SearchError("Failed to inspect search setup", details={"request_id": request_id})

    return DiagnosticsResponse(**report.to_dict())
