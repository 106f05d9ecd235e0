# catalog_search/reindex.py
"""Re-index (or remove) every product of a store.

Usage: reindex-store STORE_CODE [--delete] [--product ID ...]
"""

import argparse
import logging
import sys
from typing import List, Optional

from sqlalchemy.orm import Session

from .db import SessionLocal
from .deps import get_search_service
from .exceptions import IndexingError, PricingError
from .indexer import SearchService
from .logging_config import setup_logging
from .repository import get_product, get_store, list_product_ids

logger = logging.getLogger("catalog_search.reindex")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reindex-store",
        description="Push a store's catalog to the search index.",
    )
    parser.add_argument("store", help="Merchant store code.")
    parser.add_argument("--delete", action="store_true", default=False,
                        help="Remove the products from the index instead of indexing them.")
    parser.add_argument("--product", type=int, action="append", dest="product_ids",
                        help="Only process this product id (repeatable).")
    return parser


def run(db: Session, service: SearchService, store_code: str,
        product_ids: Optional[List[int]] = None, delete: bool = False) -> int:
    """Process the store's products; returns the number of failures."""
    store = get_store(db, store_code)
    if store is None:
        logger.error("Unknown store %s", store_code)
        return 1

    failures = 0
    ids = product_ids or list_product_ids(db, store)
    for product_id in ids:
        product = get_product(db, store, product_id)
        if product is None:
            logger.error("Product %s not found in store %s", product_id, store.code)
            failures += 1
            continue
        try:
            if delete:
                service.delete(store, product)
            else:
                service.index(store, product)
        except (IndexingError, PricingError) as e:
            failures += 1
            logger.error("Product %s failed: %s", product_id, e, exc_info=e)

    logger.info("%s %d products of store %s, %d failed",
                "Removed" if delete else "Indexed", len(ids), store.code, failures)
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = _build_parser().parse_args(argv)
    with SessionLocal() as db:
        failures = run(db, get_search_service(), args.store, args.product_ids, args.delete)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
