# catalog_search/index_config.py
"""Search index schema, loaded once from JSON resources.

``mappings.json`` describes the index shape shared by every language;
``settings_<lang>.json`` holds what differs per language.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List

from pydantic import BaseModel, Field

from .keywords import DEFAULT_MODEL

logger = logging.getLogger("catalog_search.index_config")

MAPPINGS_FILE = "mappings.json"


class IndexMapping(BaseModel):
    dimension: int
    metric: str = "cosine"
    embed_fields: List[str] = Field(default_factory=lambda: ["name", "description"])
    keyword_candidates: int = 50


class LanguageSettings(BaseModel):
    language: str
    namespace: str
    spacy_model: str = DEFAULT_MODEL


class IndexConfiguration(BaseModel):
    mapping: IndexMapping
    languages: Dict[str, LanguageSettings] = Field(default_factory=dict)

    def namespace(self, language: str) -> str:
        settings = self.languages.get(language)
        return settings.namespace if settings else f"products-{language}"

    def spacy_models(self) -> Dict[str, str]:
        return {code: s.spacy_model for code, s in self.languages.items()}


def _read_json(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_index_configuration(config_dir: Path, languages: Iterable[str]) -> IndexConfiguration:
    """Read the mapping file plus one settings file per language.

    The mapping file is required. A language without a settings file gets
    ``products-<lang>`` and the multilingual spaCy model.
    """
    mapping = IndexMapping(**_read_json(config_dir / MAPPINGS_FILE))

    per_language: Dict[str, LanguageSettings] = {}
    for code in languages:
        path = config_dir / f"settings_{code}.json"
        if path.exists():
            per_language[code] = LanguageSettings(**_read_json(path))
        else:
            logger.warning("No index settings for language %s, using defaults", code)
            per_language[code] = LanguageSettings(language=code, namespace=f"products-{code}")

    return IndexConfiguration(mapping=mapping, languages=per_language)


def available_languages(config_dir: Path) -> List[str]:
    """Language codes that ship a ``settings_<lang>.json`` file."""
    return sorted(p.stem[len("settings_"):] for p in config_dir.glob("settings_*.json"))
