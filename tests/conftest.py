# tests/conftest.py

"""Shared fixtures: an in-memory catalog, a recording search client and a wired SearchService."""

from collections.abc import Generator
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_search.cache import ExpiringCache
from catalog_search.db import init_db, make_engine
from catalog_search.documents import DocumentAssembler
from catalog_search.indexer import SearchService
from catalog_search.models import (
    Category,
    CategoryDescription,
    Language,
    Manufacturer,
    ManufacturerDescription,
    MerchantStore,
    Product,
    ProductAttribute,
    ProductDescription,
    ProductImage,
    ProductOption,
    ProductOptionDescription,
    ProductOptionValue,
    ProductOptionValueDescription,
    ProductVariant,
    ProductVariation,
)
from catalog_search.pricing import PricingService
from catalog_search.repository import get_product, get_store
from catalog_search.schemas import (
    IndexItem,
    KeywordRequest,
    KeywordResponse,
    SearchHit,
    SearchRequest,
    SearchResponse,
)
from catalog_search.search_client import SearchClient

TODAY = date(2026, 10, 19)


@pytest.fixture(autouse=True)
def mock_sleep() -> Generator[MagicMock, None, None]:
    """Patch time.sleep globally so retry loops run instantly."""
    with patch("time.sleep") as sleep:
        yield sleep


class FakeSearchClient(SearchClient):
    """In-memory stand-in for the search backend that records every call."""

    def __init__(self) -> None:
        self.documents: Dict[Tuple[str, int], IndexItem] = {}
        self.calls: List[tuple] = []
        self.configuration = None
        self.get_document_failures = 0
        self.fail_index_language: Optional[str] = None

    def configure(self, configuration) -> None:
        self.calls.append(("configure",))
        self.configuration = configuration

    def index(self, item: IndexItem) -> None:
        self.calls.append(("index", item.language, item.id))
        if item.language == self.fail_index_language:
            raise ConnectionError("backend unavailable")
        self.documents[(item.language, item.id)] = item

    def delete(self, languages: List[str], product_id: int) -> None:
        self.calls.append(("delete", tuple(languages), product_id))
        for language in languages:
            self.documents.pop((language, product_id), None)

    def get_document(self, product_id: int, languages: List[str]) -> Optional[IndexItem]:
        self.calls.append(("get_document", tuple(languages), product_id))
        if self.get_document_failures:
            self.get_document_failures -= 1
            raise ConnectionError("read timed out")
        for language in languages:
            if (language, product_id) in self.documents:
                return self.documents[(language, product_id)]
        return None

    def search_products(self, request: SearchRequest) -> SearchResponse:
        self.calls.append(("search", request.query))
        hits = [
            SearchHit(id=doc.id, name=doc.name, score=1.0)
            for (language, _), doc in sorted(self.documents.items())
            if language == request.language and doc.store == request.store
            and request.query.lower() in doc.name.lower()
        ]
        page = hits[:request.start + request.count]
        return SearchResponse(fetched=len(page), results=page[request.start:])

    def search_keywords(self, request: KeywordRequest) -> KeywordResponse:
        self.calls.append(("keywords", request.query))
        prefix = request.query.lower().split()[-1]
        found: List[str] = []
        for (language, _), doc in sorted(self.documents.items()):
            if language != request.language or doc.store != request.store:
                continue
            for keyword in doc.keywords:
                if keyword.startswith(prefix) and keyword not in found:
                    found.append(keyword)
        return KeywordResponse(keywords=found[:request.count])

    def names(self, kind: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == kind]


def stub_keywords(text: str, language: str) -> List[str]:
    return [w for w in text.lower().split() if w.isalpha()]


# ---------------------------------------------------------
# Database
# ---------------------------------------------------------
@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def _described(cls, desc_cls, code, names, languages, **kwargs):
    entity = cls(code=code, **kwargs)
    entity.descriptions = [
        desc_cls(language=languages[lang], name=name) for lang, name in names.items()
    ]
    return entity


def populate_catalog(db: Session) -> Dict[str, int]:
    """Store DEFAULT (en, fr) with product P (rich) and Q (bare). Returns product ids."""
    en, fr = Language(code="en"), Language(code="fr")
    langs = {"en": en, "fr": fr}
    store = MerchantStore(code="DEFAULT", currency="USD", default_language=en, languages=[en, fr])

    acme = _described(Manufacturer, ManufacturerDescription, "acme",
                      {"en": "Acme", "fr": "Acme"}, langs)
    shoes = _described(Category, CategoryDescription, "shoes",
                       {"en": "Shoes", "fr": "Chaussures"}, langs, sort_order=1)
    sale = _described(Category, CategoryDescription, "sale",
                      {"en": "Sale", "fr": "Soldes"}, langs, sort_order=5)
    color = _described(ProductOption, ProductOptionDescription, "color",
                       {"en": "Color", "fr": "Couleur"}, langs)
    red = _described(ProductOptionValue, ProductOptionValueDescription, "red",
                     {"en": "Red", "fr": "Rouge"}, langs)
    size = _described(ProductOption, ProductOptionDescription, "size", {"en": "Size"}, langs)
    large = _described(ProductOptionValue, ProductOptionValueDescription, "l", {}, langs)

    color_red = ProductVariation(code="color-red", option=color, option_value=red)
    size_large = ProductVariation(code="size-l", option=size, option_value=large)

    p = Product(
        sku="P",
        store=store,
        manufacturer=acme,
        price=Decimal("100.00"),
        special_price=Decimal("80.00"),
        quantity=10,
        review_average=Decimal("4.50"),
        descriptions=[
            ProductDescription(language=en, name="Trail runner shoe",
                               description="<p>Light &amp; fast</p>", seo_url="trail-runner"),
            ProductDescription(language=fr, name="Chaussure de trail",
                               description="<p>Légère</p>", seo_url="chaussure-trail"),
        ],
        attributes=[
            ProductAttribute(option=color, option_value=red),
            ProductAttribute(option=size, option_value=large),
        ],
        variants=[
            ProductVariant(sku="P-RED", variation=color_red, variation_value=size_large, quantity=3),
        ],
        images=[
            ProductImage(image_name="img0.png"),
            ProductImage(image_name="img1.png", default_image=True),
        ],
        categories=[sale, shoes],
    )
    q = Product(
        sku="Q",
        store=store,
        price=Decimal("20.00"),
        quantity=1,
        descriptions=[ProductDescription(language=en, name="Plain mug", seo_url="plain-mug")],
    )
    db.add_all([en, fr, store, p, q])
    db.commit()
    return {"P": p.id, "Q": q.id}


@pytest.fixture
def catalog(db) -> Dict[str, int]:
    return populate_catalog(db)


@pytest.fixture
def store(db, catalog) -> MerchantStore:
    return get_store(db, "DEFAULT")


@pytest.fixture
def product_p(db, store, catalog) -> Product:
    return get_product(db, store, catalog["P"])


@pytest.fixture
def product_q(db, store, catalog) -> Product:
    return get_product(db, store, catalog["Q"])


# ---------------------------------------------------------
# Services
# ---------------------------------------------------------
@pytest.fixture
def client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def pricing() -> PricingService:
    return PricingService(today=lambda: TODAY)


@pytest.fixture
def assembler(client, pricing) -> DocumentAssembler:
    return DocumentAssembler(client, pricing, stub_keywords, default_language="en")


@pytest.fixture
def service(client, assembler) -> SearchService:
    return SearchService(
        client,
        assembler,
        enabled=True,
        cleanup_retries=3,
        cleanup_backoff=0.01,
        keyword_cache=ExpiringCache(60),
    )
