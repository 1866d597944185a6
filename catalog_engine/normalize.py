from __future__ import annotations

"""
Text normalization utilities shared by the similarity search paths.

Catalog codes, descriptions and brands are Portuguese free text, so
accented letters are kept intact while punctuation is dropped.  Both
the cosine ranker and the Jaccard fallback tokenize through
:func:`tokenize` to guarantee identical treatment of queries and
catalog content.
"""

import re
import unicodedata
from typing import List, Optional

from .config import MIN_TOKEN_LENGTH, STOP_WORDS


# ---------------------------
# Basic helpers
# ---------------------------

def normalize_unicode(text: str) -> str:
    """
    Compose decomposed accents (``a`` + combining acute) into single
    code points so that ``descartável`` tokenizes the same way no
    matter how it was typed.
    """
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def normalize_whitespace(text: str) -> str:
    """
    Collapse all whitespace runs into a single space and strip edges.
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


# ---------------------------
# Tokenization
# ---------------------------

# Anything that is not an ASCII word character, whitespace or a Latin-1 accented letter
PUNCTUATION_RE = re.compile(r"[^A-Za-z0-9_\sÀ-ÿ]")


def is_stop_word(word: str) -> bool:
    return word.lower() in STOP_WORDS


def tokenize(text: Optional[str]) -> List[str]:
    """
    Lowercase, strip punctuation and split on whitespace.  Tokens
    shorter than ``MIN_TOKEN_LENGTH`` and stop words are dropped.

    Never raises: ``None`` and pure punctuation both yield ``[]``.
    Re-tokenizing ``" ".join(tokenize(t))`` gives back the same tokens.
    Splitting on punctuation happens on the first pass only, so
    ``"x-ray"`` loses its ``x`` for good and yields ``["ray"]``.
    """
    if not text:
        return []
    text = normalize_unicode(str(text)).lower()
    text = PUNCTUATION_RE.sub(" ", text)
    return [
        tok
        for tok in text.split()
        if len(tok) >= MIN_TOKEN_LENGTH and not is_stop_word(tok)
    ]


# ---------------------------
# Item documents
# ---------------------------

def item_text(code: Optional[str], description: Optional[str], brand: Optional[str] = None) -> str:
    """
    Text used to represent a catalog item for similarity: code,
    description and brand joined by spaces (brand may be absent).
    """
    return f"{code or ''} {description or ''} {brand or ''}"


def item_tokens(item) -> List[str]:
    """Tokenize any record exposing ``code``, ``description`` and ``brand``."""
    return tokenize(
        item_text(
            getattr(item, "code", None),
            getattr(item, "description", None),
            getattr(item, "brand", None),
        )
    )
