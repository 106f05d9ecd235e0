# catalog_search/search_client.py
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from pinecone import Pinecone, ServerlessSpec
from pinecone.exceptions import NotFoundException
from sentence_transformers import SentenceTransformer

from .config import Settings
from .index_config import IndexConfiguration
from .schemas import (
    IndexItem,
    KeywordRequest,
    KeywordResponse,
    SearchHit,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger("catalog_search.search_client")


class SearchClient(ABC):
    """Contract of the external search index the synchronizer talks to."""

    @abstractmethod
    def configure(self, configuration: IndexConfiguration) -> None: ...

    @abstractmethod
    def index(self, item: IndexItem) -> None: ...

    @abstractmethod
    def delete(self, languages: List[str], product_id: int) -> None: ...

    @abstractmethod
    def get_document(self, product_id: int, languages: List[str]) -> Optional[IndexItem]: ...

    @abstractmethod
    def search_products(self, request: SearchRequest) -> SearchResponse: ...

    @abstractmethod
    def search_keywords(self, request: KeywordRequest) -> KeywordResponse: ...


class SentenceEmbedder:
    """Local sentence-transformers model."""

    def __init__(self, model_name: str):
        self._model = SentenceTransformer(model_name)

    def __call__(self, text: str) -> List[float]:
        if not text:
            return []
        return self._model.encode(text).tolist()


def _get(obj: Any, key: str, default: Any = None) -> Any:
    # Pinecone responses are dict-like in some SDK versions, objects in others
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _embedding_text(item: IndexItem, fields: Iterable[str]) -> str:
    parts: List[str] = []
    for field in fields:
        value = getattr(item, field, None)
        if not value:
            continue
        if isinstance(value, dict):
            parts.append(", ".join(f"{k}: {v}" for k, v in value.items()))
        elif isinstance(value, list):
            parts.append(", ".join(str(v) for v in value))
        else:
            parts.append(str(value))
    return ". ".join(parts)


def _display_price(metadata: Dict[str, Any]) -> Optional[str]:
    raw = metadata.get("inventory")
    if not raw:
        return None
    inventory = json.loads(raw) if isinstance(raw, str) else raw
    if not inventory:
        return None
    first = inventory[0]
    return first.get("discount_price") or first.get("price")


class PineconeSearchClient(SearchClient):
    """Pinecone-backed index: one namespace per language, vector id = product id."""

    def __init__(self, pinecone: Pinecone, embedder, index_name: str,
                 cloud: str = "aws", region: str = "us-east-1"):
        self._pc = pinecone
        self._embed = embedder
        self.index_name = index_name
        self._cloud = cloud
        self._region = region
        self._index = None
        self._config: Optional[IndexConfiguration] = None

    @classmethod
    def from_settings(cls) -> "PineconeSearchClient":
        logger.info("Using Pinecone index %s, embedding model %s",
                    Settings.PINECONE_INDEX, Settings.EMBED_MODEL)
        return cls(
            Pinecone(api_key=Settings.PINECONE_API_KEY),
            SentenceEmbedder(Settings.EMBED_MODEL),
            Settings.PINECONE_INDEX,
            cloud=Settings.PINECONE_CLOUD,
            region=Settings.PINECONE_REGION,
        )

    # --- configuration ---
    def configure(self, configuration: IndexConfiguration) -> None:
        mapping = configuration.mapping
        if self.index_name not in self._pc.list_indexes().names():
            logger.info("Creating Pinecone index %s (dim=%d, metric=%s)",
                        self.index_name, mapping.dimension, mapping.metric)
            self._pc.create_index(
                name=self.index_name,
                dimension=mapping.dimension,
                metric=mapping.metric,
                spec=ServerlessSpec(cloud=self._cloud, region=self._region),
            )
        self._index = self._pc.Index(self.index_name)
        self._config = configuration

    def _require_index(self):
        if self._index is None or self._config is None:
            raise RuntimeError("PineconeSearchClient.configure() has not been called")
        return self._index

    # --- documents ---
    def index(self, item: IndexItem) -> None:
        index = self._require_index()
        vector = self._embed(_embedding_text(item, self._config.mapping.embed_fields))
        index.upsert(
            vectors=[{"id": str(item.id), "values": vector, "metadata": item.to_metadata()}],
            namespace=self._config.namespace(item.language),
        )

    def delete(self, languages: List[str], product_id: int) -> None:
        index = self._require_index()
        for language in languages:
            namespace = self._config.namespace(language)
            try:
                index.delete(ids=[str(product_id)], namespace=namespace)
            except NotFoundException:
                # Namespaces only exist once a document was written to them
                logger.debug("Namespace %s not found, nothing to delete for %s",
                             namespace, product_id)

    def get_document(self, product_id: int, languages: List[str]) -> Optional[IndexItem]:
        index = self._require_index()
        key = str(product_id)
        for language in languages:
            res = index.fetch(ids=[key], namespace=self._config.namespace(language))
            vectors = _get(res, "vectors") or {}
            found = vectors.get(key)
            if found is not None:
                return IndexItem.from_metadata(_get(found, "metadata") or {})
        return None

    # --- queries ---
    def _query(self, text: str, language: str, store: str, top_k: int) -> List[Any]:
        index = self._require_index()
        res = index.query(
            vector=self._embed(text),
            top_k=top_k,
            include_metadata=True,
            namespace=self._config.namespace(language),
            filter={"store": {"$eq": store.lower()}},
        )
        return _get(res, "matches") or []

    def search_products(self, request: SearchRequest) -> SearchResponse:
        if not request.query.strip():
            return SearchResponse()
        matches = self._query(request.query, request.language, request.store,
                              top_k=request.start + request.count)
        hits: List[SearchHit] = []
        for m in matches[request.start:]:
            md = _get(m, "metadata") or {}
            hits.append(SearchHit(
                id=int(_get(m, "id")),
                name=md.get("name") or "",
                score=float(_get(m, "score") or 0.0),
                brand=md.get("brand"),
                category=md.get("category"),
                image=md.get("image"),
                price=_display_price(md),
                link=md.get("link"),
            ))
        return SearchResponse(fetched=len(matches), results=hits)

    def search_keywords(self, request: KeywordRequest) -> KeywordResponse:
        terms = request.query.lower().split()
        if not terms:
            return KeywordResponse()
        prefix = terms[-1]
        self._require_index()
        matches = self._query(request.query, request.language, request.store,
                              top_k=self._config.mapping.keyword_candidates)
        keywords: List[str] = []
        for m in matches:
            md = _get(m, "metadata") or {}
            for keyword in md.get("keywords") or []:
                if keyword.startswith(prefix) and keyword not in keywords:
                    keywords.append(keyword)
        return KeywordResponse(keywords=keywords[:request.count])
