# catalog_search/attributes.py
"""Selectable attributes and variant selections of a product."""

import logging
from typing import Dict, List, Optional

from .metadata import resolve_name
from .models import Product, ProductVariation

logger = logging.getLogger("catalog_search.attributes")

VARIANT_SKU_KEY = "vsku"


def collect_attributes(product: Product, language: str,
                       fallback: Optional[str] = None) -> Dict[str, str]:
    """Map of localized option name to localized option value name.

    Names missing in both ``language`` and ``fallback`` fall back to codes.
    """
    attributes: Dict[str, str] = {}
    for attribute in product.attributes:
        option_name = resolve_name(attribute.option, language, fallback)
        value_name = resolve_name(attribute.option_value, language, fallback)
        if option_name is None or value_name is None:
            logger.warning(
                "Product %s attribute %s has no %s description, using codes",
                product.id, attribute.id, language,
            )
        attributes[option_name or attribute.option.code] = (
            value_name or attribute.option_value.code
        )
    return attributes


def _variation(variation: ProductVariation) -> Dict[str, str]:
    return {variation.option.code: variation.option_value.code}


def collect_variants(product: Product) -> List[Dict[str, str]]:
    """One ``{option code: value code, ..., "vsku": sku}`` map per variant."""
    variants: List[Dict[str, str]] = []
    for variant in product.variants:
        selection: Dict[str, str] = {}
        if variant.variation is not None:
            selection.update(_variation(variant.variation))
        if variant.variation_value is not None:
            selection.update(_variation(variant.variation_value))
        if variant.sku and variant.sku.strip():
            selection[VARIANT_SKU_KEY] = variant.sku
        variants.append(selection)
    return variants
