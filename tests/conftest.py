"""
Pytest configuration and shared fixtures
"""

from datetime import datetime, timedelta
from typing import Any, Dict

import pytest

from catalog_search.config import SearchSettings, reset_settings
from catalog_search.search import InMemoryCatalogStore, ProductSearchService, SearchMonitor

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def make_product(product_id: str, days_old: int = 0, **overrides: Any) -> Dict[str, Any]:
    """Catalog row as stored: camelCase variant maps, snake_case columns."""
    product = {
        "id": product_id,
        "sku": f"SKU-{product_id}",
        "title_en": "Plain item",
        "title_he": "",
        "price": 199.0,
        "currency": "ILS",
        "color_variants": {},
        "is_active": True,
        "is_deleted": False,
        "created_at": BASE_TIME - timedelta(days=days_old),
    }
    product.update(overrides)
    return product


def variant(slug: str, stock: Dict[str, Any] = None, name: str = None, active: bool = None) -> Dict[str, Any]:
    data = {"colorSlug": slug, "stockBySize": stock or {}}
    if name is not None:
        data["colorName"] = name
    if active is not None:
        data["isActive"] = active
    return data


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop the settings singleton so environment changes in one test never leak."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Settings with sequential page/count queries for deterministic tests."""
    return SearchSettings(parallel_count=False, default_page_size=24, max_page_size=100)


@pytest.fixture
def monitor():
    return SearchMonitor()


@pytest.fixture
def catalog():
    """Small bilingual shoe catalog."""
    return [
        make_product(
            "p1",
            days_old=1,
            title_en="Running sneaker",
            title_he="נעל ריצה",
            category="Shoes",
            sub_category="Sneakers",
            category_he="נעליים",
            sub_category_he="סניקרס",
            color_variants={"black": variant("black", {"36": 2, "37": 0}, name="Black")},
        ),
        make_product(
            "p2",
            days_old=2,
            title_en="Leather sandal",
            title_he="סנדל עור",
            category="Shoes",
            sub_category="Sandals",
            category_he="נעליים",
            sub_category_he="סנדלים",
            color_variants={"red": variant("red", {"38": 1})},
        ),
        make_product(
            "p3",
            days_old=3,
            title_en="Flip flops",
            title_he="כפכפים",
            category="Shoes",
            sub_category="Flip Flops",
            category_he="נעליים",
            sub_category_he="כפכפים",
            color_variants={
                "red": variant("red", {"38": 3}, active=False),
                "white": variant("white", {"39": 1}),
            },
        ),
        make_product(
            "p4",
            days_old=0,
            title_en="Canvas tote bag",
            title_he="תיק בד",
            category="Bags",
            category_he="תיקים",
            search_keywords=["tote", "beach"],
            color_variants={"grey": variant("grey", {"36": 0})},
        ),
        make_product(
            "inactive",
            title_en="Running sneaker",
            is_active=False,
            color_variants={"red": variant("red", {"36": 5})},
        ),
        make_product(
            "deleted",
            title_en="Running sneaker",
            is_deleted=True,
            color_variants={"red": variant("red", {"36": 5})},
        ),
    ]


@pytest.fixture
def store(catalog):
    return InMemoryCatalogStore(catalog)


@pytest.fixture
def service(store, settings, monitor):
    return ProductSearchService(store=store, settings=settings, monitor=monitor)
