# catalog_search/indexer.py
"""Keeps the search index in sync with the catalog and fronts search queries."""

import logging
import time
from typing import List, Optional

from .attributes import collect_variants
from .cache import ExpiringCache
from .config import Settings
from .documents import DocumentAssembler
from .exceptions import IndexCleanupError, MissingProductIdError
from .models import MerchantStore, Product
from .schemas import (
    IndexItem,
    KeywordRequest,
    KeywordResponse,
    SearchRequest,
    SearchResponse,
)
from .search_client import SearchClient

logger = logging.getLogger("catalog_search.indexer")


def product_languages(store: MerchantStore, product: Product) -> List[str]:
    """Languages a product may have documents in.

    Description languages first, then any other language the store supports,
    so a dropped translation still gets its old document removed.
    """
    languages: List[str] = []
    for description in product.descriptions:
        if description.language.code not in languages:
            languages.append(description.language.code)
    for language in store.languages:
        if language.code not in languages:
            languages.append(language.code)
    return languages


class SearchService:
    def __init__(
        self,
        client: Optional[SearchClient],
        assembler: DocumentAssembler,
        enabled: bool = Settings.SEARCH_INDEXING_ENABLED,
        cleanup_retries: int = Settings.CLEANUP_MAX_RETRIES,
        cleanup_backoff: float = Settings.CLEANUP_BACKOFF_BASE,
        keyword_cache: Optional[ExpiringCache] = None,
    ):
        self.client = client
        self.assembler = assembler
        self.enabled = enabled
        self.cleanup_retries = max(1, cleanup_retries)
        self.cleanup_backoff = cleanup_backoff
        self.keyword_cache = (
            keyword_cache if keyword_cache is not None
            else ExpiringCache(Settings.KEYWORD_CACHE_TTL)
        )

    @property
    def active(self) -> bool:
        return self.enabled and self.client is not None

    def _forget_keywords(self, store_code: str) -> None:
        store_code = store_code.lower()
        self.keyword_cache.invalidate(lambda key: key[0] == store_code)

    def _purge(self, product_id: int, languages: List[str]) -> None:
        """Remove existing documents, retrying with exponential backoff."""
        for attempt in range(1, self.cleanup_retries + 1):
            try:
                if self.client.get_document(product_id, languages) is not None:
                    self.client.delete(languages, product_id)
                return
            except Exception as e:
                if attempt == self.cleanup_retries:
                    raise IndexCleanupError(
                        f"Could not remove stale documents of product {product_id} "
                        f"after {attempt} attempts: {e}"
                    ) from e
                delay = self.cleanup_backoff * (2 ** (attempt - 1))
                logger.warning(
                    "Cleanup of product %s failed (attempt %d/%d), retrying in %.1fs: %s",
                    product_id, attempt, self.cleanup_retries, delay, e,
                )
                time.sleep(delay)

    # ---------------------------------------------------------
    # Index maintenance
    # ---------------------------------------------------------
    def index(self, store: MerchantStore, product: Product) -> List[str]:
        """Replace every document of ``product``; returns the indexed language codes.

        Documents are submitted one language at a time. A failure stops the
        run but documents already submitted stay in the index.
        """
        if product.id is None:
            raise MissingProductIdError("Cannot index a product without an id")
        if not self.active:
            logger.debug("Search indexing inactive, skipping product %s", product.id)
            return []

        languages = product_languages(store, product)
        variants = collect_variants(product)
        indexed: List[str] = []
        try:
            self._purge(product.id, languages)
            for description in product.descriptions:
                self.assembler.index_document(store, product, description, variants)
                indexed.append(description.language.code)
        finally:
            # Also on failure: a partial run may have changed the index
            self._forget_keywords(store.code)

        logger.info("Indexed product %s for store %s in %s",
                    product.id, store.code, ", ".join(indexed) or "no languages")
        return indexed

    def delete(self, store: MerchantStore, product: Product) -> List[str]:
        if product.id is None:
            raise MissingProductIdError("Cannot delete a product without an id")
        if not self.active:
            logger.debug("Search indexing inactive, skipping delete of product %s", product.id)
            return []

        languages = product_languages(store, product)
        self.client.delete(languages, product.id)
        self._forget_keywords(store.code)
        logger.info("Removed product %s from index (%s)", product.id, ", ".join(languages))
        return languages

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------
    def search(self, request: SearchRequest) -> SearchResponse:
        if not self.active:
            return SearchResponse()
        return self.client.search_products(request)

    def search_keywords(self, request: KeywordRequest) -> KeywordResponse:
        if not self.active:
            return KeywordResponse()
        key = (request.store.lower(), request.language, request.query.lower(), request.count)
        return self.keyword_cache.get_or_load(key, lambda: self.client.search_keywords(request))

    def get_document(self, product_id: int, languages: List[str]) -> Optional[IndexItem]:
        if not self.active:
            return None
        return self.client.get_document(product_id, languages)
