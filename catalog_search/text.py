# catalog_search/text.py
import re, html
from typing import List, Optional

_RE_TAG = re.compile(r"<[^>]+>")
_RE_BLOCK_TAG = re.compile(r"(?i)<\s*(?:br|/p|/li|/div|/h[1-6])\s*/?>")
_RE_SCRIPT = re.compile(r"(?is)<(script|style)\b.*?</\1\s*>")
_RE_WS = re.compile(r"\s+")
_RE_CONTROL = re.compile("[\u0000-\u001F\u007F\u200b\ufeff]")
_RE_TRAIL_SEPS = re.compile(r"([,;/|\-])\s*([,;/|\-])+")
_RE_SPACE_PUNCT = re.compile(r"\s+([,.;:!?])")
_BAD_TOKS = str.maketrans({
    "“": '"', "”": '"', "„": '"', "‟": '"',
    "’": "'", "‘": "'", "‚": "'", "‛": "'",
    "–": "-", "—": "-", "‒": "-",
    "•": " ", "★": " ", "☆": " ", "\u00a0": " ",
})


def _strip_markup(s: str) -> str:
    s = _RE_SCRIPT.sub(" ", s)
    # Block-level breaks end a sentence
    s = _RE_BLOCK_TAG.sub(". ", s)
    s = _RE_TAG.sub(" ", s)
    return html.unescape(s)


def _strip_controls(s: str) -> str:
    s = _RE_CONTROL.sub(" ", s)
    s = s.translate(_BAD_TOKS)
    s = _RE_TRAIL_SEPS.sub(r"\1 ", s)
    s = _RE_WS.sub(" ", s)
    s = _RE_SPACE_PUNCT.sub(r"\1", s)
    s = re.sub(r"(?:\.\s*){2,}", ". ", s)
    return s.strip(" .")


def _sentenceize(s: str) -> str:
    parts = re.split(r"(?<=[.!?])\s+", s.strip())
    out: List[str] = []
    for p in parts:
        p = p.strip()
        if not p:
            continue
        p = p[:1].upper() + p[1:]
        out.append(p.rstrip(",;"))
    return " ".join(out)


def clean_text(raw: Optional[str]) -> str:
    """Turn an HTML product description into a single line of plain prose.

    >>> clean_text("<p>soft cotton tee</p><ul><li>machine washable</li></ul>")
    'Soft cotton tee. Machine washable'
    """
    if not raw:
        return ""
    s = _strip_markup(raw)
    s = _strip_controls(s)
    return _sentenceize(s)
