# catalog_search/main.py
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .db import get_db, init_db
from .deps import add_cors, get_search_service
from .exceptions import IndexingError, MissingProductIdError
from .indexer import SearchService, product_languages
from .logging_config import setup_logging
from .models import MerchantStore, Product
from .repository import get_product, get_store
from .schemas import (
    IndexItem,
    IndexResult,
    KeywordRequest,
    KeywordResponse,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger("catalog_search.api")


# ---------------------------------------------------------
# Initialization
# ---------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    log_file = setup_logging()
    logger.info("catalog_search API starting, log file: %s", log_file)
    init_db()
    yield
    logger.info("catalog_search API shutting down")


app = FastAPI(title="Catalog Search Indexing API", version="1.0.0", lifespan=lifespan)
add_cors(app)


@app.exception_handler(MissingProductIdError)
async def missing_id_handler(request: Request, exc: MissingProductIdError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(IndexingError)
async def indexing_error_handler(request: Request, exc: IndexingError):
    logger.error("Indexing failed on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


def _store_or_404(db: Session, store_code: str) -> MerchantStore:
    store = get_store(db, store_code)
    if not store:
        raise HTTPException(status_code=404, detail=f"Store not found: {store_code}")
    return store


def _product_or_404(db: Session, store: MerchantStore, product_id: int) -> Product:
    product = get_product(db, store, product_id)
    if not product:
        logger.warning("Product %s not found in store %s", product_id, store.code)
        raise HTTPException(status_code=404, detail=f"Product not found for id={product_id}")
    return product


# ---------------------------------------------------------
# Health check
# ---------------------------------------------------------
@app.get("/health")
def health(service: SearchService = Depends(get_search_service)):
    return {"status": "ok", "indexing": "active" if service.active else "inactive"}


# ---------------------------------------------------------
# Index maintenance
# ---------------------------------------------------------
@app.post("/stores/{store_code}/products/{product_id}/index", response_model=IndexResult)
def index_product(store_code: str, product_id: int, db: Session = Depends(get_db),
                  service: SearchService = Depends(get_search_service)):
    store = _store_or_404(db, store_code)
    product = _product_or_404(db, store, product_id)
    languages = service.index(store, product)
    return IndexResult(product_id=product.id, store=store.code,
                       action="indexed" if service.active else "skipped", languages=languages)


@app.delete("/stores/{store_code}/products/{product_id}/index", response_model=IndexResult)
def delete_product(store_code: str, product_id: int, db: Session = Depends(get_db),
                   service: SearchService = Depends(get_search_service)):
    store = _store_or_404(db, store_code)
    product = _product_or_404(db, store, product_id)
    languages = service.delete(store, product)
    return IndexResult(product_id=product.id, store=store.code,
                       action="deleted" if service.active else "skipped", languages=languages)


@app.get("/stores/{store_code}/products/{product_id}/document", response_model=IndexItem)
def get_document(store_code: str, product_id: int,
                 language: Optional[List[str]] = Query(None),
                 db: Session = Depends(get_db),
                 service: SearchService = Depends(get_search_service)):
    store = _store_or_404(db, store_code)
    if not language:
        product = _product_or_404(db, store, product_id)
        language = product_languages(store, product)
    item = service.get_document(product_id, language)
    if item is None:
        raise HTTPException(status_code=404, detail=f"No indexed document for id={product_id}")
    return item


# ---------------------------------------------------------
# Search
# ---------------------------------------------------------
@app.post("/stores/{store_code}/search", response_model=SearchResponse)
def search(store_code: str, req: SearchRequest, db: Session = Depends(get_db),
           service: SearchService = Depends(get_search_service)):
    store = _store_or_404(db, store_code)
    return service.search(req.model_copy(update={"store": store.code.lower()}))


@app.post("/stores/{store_code}/search/keywords", response_model=KeywordResponse)
def search_keywords(store_code: str, req: KeywordRequest, db: Session = Depends(get_db),
                    service: SearchService = Depends(get_search_service)):
    store = _store_or_404(db, store_code)
    return service.search_keywords(req.model_copy(update={"store": store.code.lower()}))


if __name__ == "__main__":
    import uvicorn
    import os

    port = int(os.environ.get("PORT", 10000))
    uvicorn.run("catalog_search.main:app", host="0.0.0.0", port=port, log_level="info")
