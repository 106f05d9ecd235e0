# catalog_search/exceptions.py

"""Domain errors raised by the indexing pipeline."""

from typing import Optional


class IndexingError(Exception):
    """Base class for failures while syncing products with the search index."""


class MissingProductIdError(IndexingError):
    """The product has no identity, so it cannot be keyed in the index."""


class DocumentBuildError(IndexingError):
    """One language document could not be assembled."""

    def __init__(self, product_id, language: Optional[str], cause: Exception):
        super().__init__(
            f"Could not build index document for product {product_id} [{language}]: {cause}"
        )
        self.product_id = product_id
        self.language = language


class IndexCleanupError(IndexingError):
    """Stale documents could not be removed before re-indexing."""


class PricingError(Exception):
    """Price or inventory could not be resolved for a SKU."""
