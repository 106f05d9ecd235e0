# catalog_search/repository.py
"""Queries that load the product read model for indexing."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from .models import (
    Category,
    Manufacturer,
    MerchantStore,
    Product,
    ProductAttribute,
    ProductDescription,
    ProductOption,
    ProductOptionValue,
    ProductVariant,
    ProductVariation,
)


def _variation_loader(attr):
    return (
        selectinload(Product.variants).selectinload(attr).options(
            selectinload(ProductVariation.option),
            selectinload(ProductVariation.option_value),
        )
    )


# Everything the document assembler touches, loaded up front
_PRODUCT_GRAPH = (
    selectinload(Product.store).selectinload(MerchantStore.languages),
    selectinload(Product.descriptions).selectinload(ProductDescription.language),
    selectinload(Product.manufacturer).selectinload(Manufacturer.descriptions),
    selectinload(Product.categories).selectinload(Category.descriptions),
    selectinload(Product.images),
    selectinload(Product.attributes).selectinload(ProductAttribute.option)
        .selectinload(ProductOption.descriptions),
    selectinload(Product.attributes).selectinload(ProductAttribute.option_value)
        .selectinload(ProductOptionValue.descriptions),
    _variation_loader(ProductVariant.variation),
    _variation_loader(ProductVariant.variation_value),
)


def get_store(db: Session, code: str) -> Optional[MerchantStore]:
    return db.execute(
        select(MerchantStore).where(MerchantStore.code == code)
    ).scalar_one_or_none()


def get_product(db: Session, store: MerchantStore, product_id: int) -> Optional[Product]:
    """Load a product of ``store`` with all relations needed for indexing."""
    return db.execute(
        select(Product)
        .where(Product.id == product_id, Product.store_id == store.id)
        .options(*_PRODUCT_GRAPH)
    ).scalar_one_or_none()


def list_product_ids(db: Session, store: MerchantStore) -> List[int]:
    return list(
        db.execute(
            select(Product.id).where(Product.store_id == store.id).order_by(Product.id)
        ).scalars()
    )
