"""
SQLAlchemy ORM Models
Table definitions for the storefront product catalog.

The catalog is owned by the storefront ingestion pipeline; the search engine
only reads it. Column names follow the storefront schema (camelCase, quoted),
attribute names are snake_case.
"""

from sqlalchemy import (
    Column, String, Float, Boolean, TIMESTAMP, Text, Index, text
)
from sqlalchemy.dialects.postgresql import JSONB, ARRAY, TSVECTOR
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

SEARCH_VECTOR_INDEX = "products_search_vector_gin"


class Product(Base):
    """
    Product model.

    One row per catalog product, including the pre-built full-text
    projection (search_vector) maintained by the ingestion pipeline.
    """
    __tablename__ = 'products'

    id = Column(String(64), primary_key=True)
    sku = Column(String(255), nullable=False, unique=True, index=True)

    # Bilingual content
    title_en = Column('title_en', Text, nullable=False, server_default='')
    title_he = Column('title_he', Text, nullable=False, server_default='')
    description_en = Column('description_en', Text, nullable=True)
    description_he = Column('description_he', Text, nullable=True)
    brand = Column(String(255), nullable=True)

    # Pricing
    price = Column(Float, nullable=False)
    sale_price = Column('salePrice', Float, nullable=True)
    currency = Column(String(10), nullable=False, server_default='ILS')

    # Category hierarchy (names, English + Hebrew)
    category = Column(String(255), nullable=True)
    sub_category = Column('subCategory', String(255), nullable=True)
    sub_sub_category = Column('subSubCategory', String(255), nullable=True)
    category_he = Column('category_he', String(255), nullable=True)
    sub_category_he = Column('subCategory_he', String(255), nullable=True)
    sub_sub_category_he = Column('subSubCategory_he', String(255), nullable=True)

    # Category hierarchy (opaque ids)
    categories_path = Column('categories_path', ARRAY(String), nullable=False, server_default='{}')
    categories_path_id = Column('categories_path_id', ARRAY(String), nullable=False, server_default='{}')
    category_id = Column('categoryId', String(64), nullable=True)

    # Material & care
    upper_material_en = Column('upperMaterial_en', Text, nullable=True)
    upper_material_he = Column('upperMaterial_he', Text, nullable=True)
    material_inner_sole_en = Column('materialInnerSole_en', Text, nullable=True)
    material_inner_sole_he = Column('materialInnerSole_he', Text, nullable=True)
    lining_en = Column('lining_en', Text, nullable=True)
    lining_he = Column('lining_he', Text, nullable=True)
    sole_en = Column('sole_en', Text, nullable=True)
    sole_he = Column('sole_he', Text, nullable=True)
    heel_height_en = Column('heelHeight_en', Text, nullable=True)
    heel_height_he = Column('heelHeight_he', Text, nullable=True)

    # SEO
    seo_title_en = Column('seo_title_en', Text, nullable=True)
    seo_title_he = Column('seo_title_he', Text, nullable=True)
    seo_description_en = Column('seo_description_en', Text, nullable=True)
    seo_description_he = Column('seo_description_he', Text, nullable=True)
    seo_slug = Column('seo_slug', String(255), nullable=True)

    search_keywords = Column('searchKeywords', ARRAY(String), nullable=False, server_default='{}')

    # Color variants: {colorSlug: {colorSlug, colorName, isActive, stockBySize: {size: qty}}}
    color_variants = Column('colorVariants', JSONB, nullable=False, server_default='{}',
                            comment='Per-color variant data including stock by size')

    # Flags
    is_active = Column('isActive', Boolean, nullable=False, server_default='true')
    is_deleted = Column('isDeleted', Boolean, nullable=False, server_default='false')

    # Timestamps
    created_at = Column('createdAt', TIMESTAMP, nullable=False, server_default=func.now())
    updated_at = Column('updatedAt', TIMESTAMP, nullable=False, server_default=func.now(), onupdate=func.now())

    # Full-text projection, rebuilt by the ingestion pipeline
    search_vector = Column('search_vector', TSVECTOR, nullable=True)

    __table_args__ = (
        Index(SEARCH_VECTOR_INDEX, 'search_vector', postgresql_using='gin'),
        Index('idx_products_active', 'isActive', 'isDeleted',
              postgresql_where=text('"isActive" = true AND "isDeleted" = false')),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, sku={self.sku})>"


# Category-name columns matched by the category phrase and the category text bonus
CATEGORY_NAME_COLUMNS = (
    Product.category,
    Product.sub_category,
    Product.sub_sub_category,
    Product.category_he,
    Product.sub_category_he,
    Product.sub_sub_category_he,
)
