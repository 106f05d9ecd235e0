# catalog_search/keywords.py
"""spaCy-backed keyword extraction for indexing and autocomplete."""

import logging
from typing import Dict, List, Optional

import spacy

logger = logging.getLogger("catalog_search.keywords")

DEFAULT_MODEL = "xx_ent_wiki_sm"
_KEYWORD_POS = {"NOUN", "PROPN"}


def _load_pipeline(model: str):
    try:
        return spacy.load(model)
    except OSError:
        logger.warning("spaCy model %s missing, downloading", model)
        import spacy.cli
        spacy.cli.download(model)
        return spacy.load(model)


class KeywordExtractor:
    """Loads one spaCy pipeline per language on first use."""

    def __init__(self, models: Optional[Dict[str, str]] = None):
        self._models = dict(models or {})
        self._pipelines: Dict[str, object] = {}

    def _nlp(self, language: str):
        if language not in self._pipelines:
            self._pipelines[language] = _load_pipeline(self._models.get(language, DEFAULT_MODEL))
        return self._pipelines[language]

    def extract(self, text: str, language: str) -> List[str]:
        """Unique lower-cased noun lemmas of ``text``, in order of appearance."""
        if not text:
            return []
        keywords: List[str] = []
        for token in self._nlp(language)(text):
            if token.pos_ in _KEYWORD_POS and token.is_alpha:
                lemma = (token.lemma_ or token.text).lower()
                if lemma not in keywords:
                    keywords.append(lemma)
        return keywords
