"""
Search Models
Pydantic models for the search endpoints.
"""

from typing import Any, Dict, List
from pydantic import BaseModel, Field

from ...models.catalog import CatalogDocument, SearchResultPage


class ProductResult(CatalogDocument):
    """
    Single product in a search result page.

    Carries the full catalog document, including the color-variant map with
    stock by size, plus flattened active colors and in-stock sizes.
    """

    colors: List[str] = Field(default_factory=list, description="Active color slugs")
    sizes: List[str] = Field(default_factory=list, description="Sizes in stock in any active color")

    @classmethod
    def from_document(cls, document: CatalogDocument) -> "ProductResult":
        active = [v for v in document.color_variants.values() if v.enabled]
        sizes = sorted({size for v in active for size, qty in v.stock_by_size.items() if qty > 0})

        return cls(
            **dict(document),
            colors=[v.color_slug for v in active if v.color_slug],
            sizes=sizes,
        )

class SearchResponse(BaseModel):
    """
    Search response model.

    Items are in rank order; total counts every candidate, not just this page.
    """

    items: List[ProductResult] = Field(default_factory=list)
    total: int = Field(..., ge=0, description="Total number of matching products")
    page: int = Field(..., ge=1)
    limit: int = Field(..., gt=0)
    query: str = ""

    @classmethod
    def from_page(cls, page: SearchResultPage) -> "SearchResponse":
        return cls(
            items=[ProductResult.from_document(doc) for doc in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            query=page.query,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "items": [],
                "total": 0,
                "page": 1,
                "limit": 24,
                "query": "נעלי ספורט 38",
            }
        }


class DiagnosticsResponse(BaseModel):
    """Search setup report."""

    ready: bool
    search_vector_column_exists: bool
    search_vector_index_exists: bool
    total_products: int
    active_products: int
    products_with_search_vector: int
    sample_products: List[Dict[str, Any]] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
