# catalog_search/documents.py
"""Assembly of one language-specific index document per product description."""

import logging
from typing import Callable, Dict, List, Optional

from .attributes import collect_attributes
from .exceptions import DocumentBuildError, IndexingError
from .metadata import resolve_name
from .models import Category, MerchantStore, Product, ProductDescription, ProductImage
from .pricing import PricingService
from .schemas import IndexItem, InventoryEntry
from .search_client import SearchClient
from .text import clean_text

logger = logging.getLogger("catalog_search.documents")

KeywordFn = Callable[[str, str], List[str]]


def select_image(product: Product) -> Optional[ProductImage]:
    """The default image, else the first one, else None."""
    images = sorted(product.images, key=lambda i: i.id or 0)
    for image in images:
        if image.default_image:
            return image
    return images[0] if images else None


def primary_category(product: Product) -> Optional[Category]:
    """Lowest (sort_order, id) category, so the choice is stable across loads."""
    if not product.categories:
        return None
    return min(product.categories, key=lambda c: (c.sort_order or 0, c.id or 0))


def fallback_language(store: MerchantStore, default: str) -> str:
    if store.default_language is not None:
        return store.default_language.code
    return default


class DocumentAssembler:
    def __init__(self, client: Optional[SearchClient], pricing: PricingService,
                 keywords: KeywordFn, default_language: str = "en"):
        self.client = client
        self.pricing = pricing
        self.keywords = keywords
        self.default_language = default_language

    def _inventory(self, store: MerchantStore, product: Product) -> List[InventoryEntry]:
        entries = [self.pricing.inventory_entry(product, store.currency)]
        for variant in product.variants:
            entries.append(self.pricing.inventory_entry(variant, store.currency))
        return entries

    def build(self, store: MerchantStore, product: Product, description: ProductDescription,
              variants: Optional[List[Dict[str, str]]] = None) -> IndexItem:
        """Build the document for ``description``'s language. Raises DocumentBuildError."""
        language = None
        try:
            language = description.language.code
            fallback = fallback_language(store, self.default_language)
            image = select_image(product)

            item = IndexItem(
                id=product.id,
                store=store.code.lower(),
                language=language,
                name=description.name,
                description=clean_text(description.description),
                inventory=self._inventory(store, product),
                link=description.seo_url,
            )

            if product.manufacturer is not None:
                item.brand = resolve_name(product.manufacturer, language, fallback)
                if item.brand is None:
                    logger.warning("Manufacturer %s has no name for %s",
                                   product.manufacturer.code, language)

            category = primary_category(product)
            if category is not None:
                item.category = resolve_name(category, language, fallback)
                if item.category is None:
                    logger.warning("Category %s has no name for %s", category.code, language)

            if product.attributes:
                item.attributes = collect_attributes(product, language, fallback)
            if image is not None:
                item.image = image.image_name
            if product.review_average is not None:
                item.reviews = str(product.review_average)
            if variants:
                item.variants = variants

            item.keywords = self.keywords(description.name, language)
            return item
        except Exception as e:
            raise DocumentBuildError(product.id, language, e) from e

    def index_document(self, store: MerchantStore, product: Product,
                       description: ProductDescription,
                       variants: Optional[List[Dict[str, str]]] = None) -> IndexItem:
        """Build one document and submit it to the search client."""
        item = self.build(store, product, description, variants)
        try:
            self.client.index(item)
        except Exception as e:
            raise IndexingError(
                f"Search backend rejected product {item.id} [{item.language}]: {e}"
            ) from e
        logger.debug("Indexed product %s [%s]", item.id, item.language)
        return item
