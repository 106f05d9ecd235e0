import logging
from functools import lru_cache

from fastapi.middleware.cors import CORSMiddleware

from .cache import ExpiringCache
from .config import Settings
from .documents import DocumentAssembler
from .index_config import IndexConfiguration, available_languages, load_index_configuration
from .indexer import SearchService
from .keywords import KeywordExtractor
from .pricing import PricingService
from .search_client import PineconeSearchClient

logger = logging.getLogger("catalog_search.deps")


def add_cors(app, origins=None):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@lru_cache(maxsize=1)
def get_index_configuration() -> IndexConfiguration:
    languages = set(available_languages(Settings.INDEX_CONFIG_DIR))
    languages.add(Settings.DEFAULT_LANGUAGE)
    return load_index_configuration(Settings.INDEX_CONFIG_DIR, sorted(languages))


def _build_client(configuration: IndexConfiguration):
    if not Settings.PINECONE_API_KEY:
        logger.warning("PINECONE_API_KEY not set, search indexing is unavailable")
        return None
    client = PineconeSearchClient.from_settings()
    try:
        client.configure(configuration)
    except Exception:
        logger.exception("Could not configure Pinecone index %s, search indexing is unavailable",
                         client.index_name)
        return None
    return client


@lru_cache(maxsize=1)
def get_search_service() -> SearchService:
    configuration = get_index_configuration()
    client = _build_client(configuration) if Settings.SEARCH_INDEXING_ENABLED else None
    extractor = KeywordExtractor(configuration.spacy_models())
    assembler = DocumentAssembler(
        client,
        PricingService(),
        extractor.extract,
        default_language=Settings.DEFAULT_LANGUAGE,
    )
    return SearchService(
        client,
        assembler,
        enabled=Settings.SEARCH_INDEXING_ENABLED,
        keyword_cache=ExpiringCache(Settings.KEYWORD_CACHE_TTL),
    )
