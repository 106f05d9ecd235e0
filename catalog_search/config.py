# catalog_search/config.py

"""Central configuration for the catalog search service."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables (optional for local dev)
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class Settings:
    """Environment-backed settings, read once at import time."""

    # --- Database ---
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./catalog.db")

    # --- Search indexing ---
    SEARCH_INDEXING_ENABLED: bool = _flag("SEARCH_INDEXING_ENABLED", "true")
    DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "en")
    CLEANUP_MAX_RETRIES: int = int(os.getenv("CLEANUP_MAX_RETRIES", "3"))
    CLEANUP_BACKOFF_BASE: float = float(os.getenv("CLEANUP_BACKOFF_BASE", "0.5"))
    KEYWORD_CACHE_TTL: float = float(os.getenv("KEYWORD_CACHE_TTL", "300"))

    # --- Pinecone ---
    PINECONE_API_KEY = os.getenv("PINECONE_API_KEY")
    PINECONE_INDEX: str = os.getenv("PINECONE_INDEX", "catalog-products")
    PINECONE_CLOUD: str = os.getenv("PINECONE_CLOUD", "aws")
    PINECONE_REGION: str = os.getenv("PINECONE_REGION", "us-east-1")

    # Embedding model used for documents and queries
    EMBED_MODEL: str = os.getenv("EMBED_MODEL", "all-mpnet-base-v2")

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    INDEX_CONFIG_DIR: Path = Path(
        os.getenv("INDEX_CONFIG_DIR", str(Path(__file__).resolve().parent / "search_config"))
    )
    LOGS_DIR: Path = Path(os.getenv("LOGS_DIR", str(BASE_DIR / "logs")))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")
