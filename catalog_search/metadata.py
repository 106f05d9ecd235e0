# catalog_search/metadata.py
"""Localized display names for manufacturers, categories, options and option values.

Every described entity in the read model exposes ``descriptions``, each with a
``language`` and a ``name``. Lookups return ``None`` on a miss so callers can
decide between falling back and omitting the field.
"""

from typing import Optional


def localized_name(entity, language: str) -> Optional[str]:
    """Name of the first description in ``language``, or None."""
    if entity is None:
        return None
    for description in entity.descriptions:
        if description.language is not None and description.language.code == language:
            return description.name
    return None


def resolve_name(entity, language: str, fallback: Optional[str] = None) -> Optional[str]:
    """Like :func:`localized_name`, retrying with ``fallback`` on a miss."""
    name = localized_name(entity, language)
    if name is None and fallback and fallback != language:
        name = localized_name(entity, fallback)
    return name
