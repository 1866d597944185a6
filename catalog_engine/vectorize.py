from __future__ import annotations

"""
TF-IDF vectors over token lists and cosine similarity between them.

Vectors are plain ``{token: weight}`` dicts because item documents are
short and the vocabulary of one comparison is tiny; numpy is only
used for the dot product and norms over the union of keys.

The IDF term is ``ln(|corpus| / (df + 1))`` without smoothing.  With a
single-document corpus every weight shares the same (negative)
factor, which cancels out in the cosine; with the two-document
corpus used for item-to-item comparison shared tokens are weighted
and tokens unique to one side get zero weight.
"""

import math
from collections import Counter
from typing import Dict, List, Optional, Sequence

import numpy as np

TfIdfVector = Dict[str, float]


def term_frequencies(tokens: Sequence[str]) -> Dict[str, float]:
    """``count(t) / len(tokens)`` for every distinct token."""
    if not tokens:
        return {}
    total = len(tokens)
    return {tok: count / total for tok, count in Counter(tokens).items()}


def inverse_document_frequency(token: str, corpus: Sequence[set]) -> float:
    df = sum(1 for doc in corpus if token in doc)
    return math.log(len(corpus) / (df + 1))


def build_tfidf_vector(
    tokens: Sequence[str],
    corpus: Optional[Sequence[Sequence[str]]] = None,
) -> TfIdfVector:
    """Weight each token of ``tokens`` by ``tf * idf`` against ``corpus``.

    ``corpus`` is usually ``[tokens]`` (the document alone) or the pair
    of documents being compared.  An empty or missing corpus falls back
    to ``[tokens]``.  An empty document gives an empty vector.
    """
    tf = term_frequencies(tokens)
    if not tf:
        return {}
    docs: List[set] = [set(doc) for doc in (corpus or [tokens])]
    return {tok: freq * inverse_document_frequency(tok, docs) for tok, freq in tf.items()}


def cosine_similarity(vec_a: TfIdfVector, vec_b: TfIdfVector) -> float:
    """Cosine of the angle between two sparse vectors, clipped to ``[0, 1]``.

    Returns ``0.0`` when either vector has zero magnitude.
    """
    if not vec_a or not vec_b:
        return 0.0
    keys = sorted(set(vec_a) | set(vec_b))
    a = np.array([vec_a.get(k, 0.0) for k in keys], dtype="float64")
    b = np.array([vec_b.get(k, 0.0) for k in keys], dtype="float64")
    magnitude = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if magnitude == 0.0:
        return 0.0
    return float(np.clip(np.dot(a, b) / magnitude, 0.0, 1.0))


def document_vector(tokens: Sequence[str]) -> TfIdfVector:
    """Vector of a document against its own single-document corpus."""
    return build_tfidf_vector(tokens, [tokens])


def pairwise_vectors(tokens_a: Sequence[str], tokens_b: Sequence[str]) -> tuple[TfIdfVector, TfIdfVector]:
    """Vectors of two documents sharing the corpus ``[a, b]``."""
    corpus = [tokens_a, tokens_b]
    return build_tfidf_vector(tokens_a, corpus), build_tfidf_vector(tokens_b, corpus)
