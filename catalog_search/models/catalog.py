"""
Catalog document models.
Typed, validated projection of catalog rows as read by the search engine.
"""

from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ColorVariant(BaseModel):
    """
    One color variant of a product.

    Mirrors the stored JSON shape (camelCase keys). Stock values that are not
    non-negative integers are read as 0.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    color_slug: str = Field(..., alias="colorSlug")
    color_name: Optional[str] = Field(None, alias="colorName")
    is_active: Optional[bool] = Field(None, alias="isActive")
    stock_by_size: Dict[str, int] = Field(default_factory=dict, alias="stockBySize")

    @field_validator("stock_by_size", mode="before")
    @classmethod
    def coerce_stock(cls, v: Any) -> Dict[str, int]:
        """Coerce size -> stock map into non-negative integers."""
        if not isinstance(v, dict):
            return {}

        stock = {}
        for size, quantity in v.items():
            stock[str(size).strip()] = _to_stock_count(quantity)
        return stock

    @property
    def enabled(self) -> bool:
        """Variants without an isActive flag count as active."""
        return self.is_active is None or self.is_active

    def in_stock(self, size: str) -> bool:
        """Check if this variant is available for the given size label."""
        return self.stock_by_size.get(size, 0) > 0


class CatalogDocument(BaseModel):
    """
    Searchable projection of one catalog product.
    """

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    # Identifiers
    id: str
    sku: str

    # Bilingual content
    title_en: str = ""
    title_he: str = ""
    description_en: Optional[str] = None
    description_he: Optional[str] = None
    brand: Optional[str] = None

    # Pricing
    price: float = 0.0
    sale_price: Optional[float] = None
    currency: str = "ILS"

    # Category hierarchy
    category: Optional[str] = None
    sub_category: Optional[str] = None
    sub_sub_category: Optional[str] = None
    category_he: Optional[str] = None
    sub_category_he: Optional[str] = None
    sub_sub_category_he: Optional[str] = None
    categories_path: List[str] = Field(default_factory=list)
    categories_path_id: List[str] = Field(default_factory=list)
    category_id: Optional[str] = None

    # Material & care
    upper_material_en: Optional[str] = None
    upper_material_he: Optional[str] = None
    material_inner_sole_en: Optional[str] = None
    material_inner_sole_he: Optional[str] = None
    lining_en: Optional[str] = None
    lining_he: Optional[str] = None
    sole_en: Optional[str] = None
    sole_he: Optional[str] = None
    heel_height_en: Optional[str] = None
    heel_height_he: Optional[str] = None

    # SEO
    seo_title_en: Optional[str] = None
    seo_title_he: Optional[str] = None
    seo_description_en: Optional[str] = None
    seo_description_he: Optional[str] = None
    seo_slug: Optional[str] = None

    search_keywords: List[str] = Field(default_factory=list)
    color_variants: Dict[str, ColorVariant] = Field(default_factory=dict)

    # Flags
    is_active: bool = True
    is_deleted: bool = False

    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("categories_path", "categories_path_id", "search_keywords", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("color_variants", mode="before")
    @classmethod
    def parse_color_variants(cls, v: Any) -> Any:
        """
        Normalize the stored variant map.

        Entries that are not objects are dropped; a missing colorSlug is
        filled from the map key.
        """
        if not isinstance(v, dict):
            return {}

        variants = {}
        for slug, data in v.items():
            if isinstance(data, ColorVariant):
                variants[str(slug)] = data
                continue
            if not isinstance(data, dict):
                continue
            data = dict(data)
            if not data.get("colorSlug") and not data.get("color_slug"):
                data["colorSlug"] = str(slug)
            variants[str(slug)] = data
        return variants

    @property
    def eligible(self) -> bool:
        """Only active, non-deleted products are searchable."""
        return self.is_active and not self.is_deleted

    def category_names(self) -> List[str]:
        """Category names at all levels, English then Hebrew, skipping blanks."""
        names = [
            self.category,
            self.sub_category,
            self.sub_sub_category,
            self.category_he,
            self.sub_category_he,
            self.sub_sub_category_he,
        ]
        return [name for name in names if name]

    def searchable_fields(self) -> Iterator[str]:
        """Yield every text field that makes up the full-text projection."""
        fields = [
            self.title_en,
            self.title_he,
            self.description_en,
            self.description_he,
            self.sku,
            self.brand,
            self.upper_material_en,
            self.upper_material_he,
            self.material_inner_sole_en,
            self.material_inner_sole_he,
            self.lining_en,
            self.lining_he,
            self.sole_en,
            self.sole_he,
            self.heel_height_en,
            self.heel_height_he,
        ]
        for value in fields:
            if value:
                yield value
        yield from self.category_names()
        for keyword in self.search_keywords:
            if keyword:
                yield keyword


class SearchResultPage(BaseModel):
    """
    One page of ranked search results.
    """

    items: List[CatalogDocument] = Field(default_factory=list)
    total: int = Field(0, ge=0)
    page: int = Field(1, ge=1)
    limit: int = Field(..., gt=0)
    query: str = ""

    @model_validator(mode="after")
    def check_consistency(self) -> "SearchResultPage":
        if len(self.items) > self.total:
            raise ValueError(
                f"Page holds {len(self.items)} items but total is {self.total}"
            )
        return self

    @classmethod
    def empty(cls, limit: int, query: str = "") -> "SearchResultPage":
        """Empty first page."""
        return cls(items=[], total=0, page=1, limit=limit, query=query)


def _to_stock_count(value: Any) -> int:
    """Read a stock quantity; anything but a non-negative integer counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            return int(value)
    return 0
