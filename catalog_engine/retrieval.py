from __future__ import annotations

"""
"Have we seen something like this before" search over the catalog.

Two rankers live here:

* :func:`rank_items` scores every catalog item by TF-IDF cosine
  similarity against the query and returns ``(item, similarity)``
  pairs above a strict cutoff.
* :func:`fuzzy_match` is a cheaper token-set Jaccard fallback that
  keeps items at or above an inclusive threshold and returns items
  only.

Both are pure functions over a corpus snapshot.  The ``*_items``
wrappers take a zero-argument callable that fetches the snapshot;
if that fetch fails the error is logged as a :class:`RetrievalError`
and an empty result is returned, so a broken store never crashes the
request that asked for suggestions.

Example::

    from catalog_engine.retrieval import rank_items
    for item, similarity in rank_items("seringa descartável 10ml", catalog):
        ...

"""

from typing import Callable, List, Sequence, Set, Tuple

from loguru import logger

from .config import (
    FUZZY_LIMIT,
    FUZZY_THRESHOLD,
    MIN_SIMILARITY,
    RANK_LIMIT,
    SIMILARITY_DECIMALS,
    CatalogItem,
    SimilarItem,
)
from .normalize import item_tokens, tokenize
from .vectorize import cosine_similarity, document_vector

CatalogFetcher = Callable[[], Sequence[CatalogItem]]


class RetrievalError(RuntimeError):
    """The catalog snapshot could not be fetched."""


def _fetch_corpus(fetch_catalog: CatalogFetcher) -> List[CatalogItem]:
    try:
        return list(fetch_catalog())
    except Exception as e:
        raise RetrievalError(f"Failed to fetch catalog items: {e}") from e


# ---------------------------
# Cosine ranker
# ---------------------------

def rank_items(
    query: str,
    corpus: Sequence[CatalogItem],
    limit: int = RANK_LIMIT,
    min_similarity: float = MIN_SIMILARITY,
) -> List[Tuple[CatalogItem, float]]:
    """Rank ``corpus`` by cosine similarity to ``query``.

    Items scoring ``<= min_similarity`` are dropped.  Sorting is stable,
    so ties keep corpus order.  Similarities are rounded to two
    decimals after sorting and truncation.
    """
    if limit <= 0:
        return []
    query_vec = document_vector(tokenize(query))
    if not query_vec:
        return []

    scored: List[Tuple[CatalogItem, float]] = []
    for item in corpus:
        similarity = cosine_similarity(query_vec, document_vector(item_tokens(item)))
        if similarity > min_similarity:
            scored.append((item, similarity))

    scored.sort(key=lambda pair: -pair[1])
    logger.debug("{} of {} catalog items above {}", len(scored), len(corpus), min_similarity)
    return [(item, round(sim, SIMILARITY_DECIMALS)) for item, sim in scored[:limit]]


def find_similar_items(
    query: str,
    fetch_catalog: CatalogFetcher,
    limit: int = RANK_LIMIT,
    *,
    strict: bool = False,
) -> List[SimilarItem]:
    """Fetch the catalog and rank it against ``query``.

    On a fetch failure the :class:`RetrievalError` is logged and ``[]``
    returned, unless ``strict`` is set, in which case it is raised.
    Sample history is left empty for the caller to fill in.
    """
    try:
        corpus = _fetch_corpus(fetch_catalog)
    except RetrievalError:
        logger.exception("Error finding similar items for query {!r}", query)
        if strict:
            raise
        return []
    ranked = rank_items(query, corpus, limit=limit)
    logger.info("Found {} similar items for query {!r}", len(ranked), query)
    return [SimilarItem(item=item, similarity=sim) for item, sim in ranked]


# ---------------------------
# Jaccard fallback
# ---------------------------

def jaccard_similarity(tokens_a: Sequence[str], tokens_b: Sequence[str]) -> float:
    """``|A ∩ B| / |A ∪ B|`` over token sets; ``0.0`` for two empty sets."""
    set_a: Set[str] = set(tokens_a)
    set_b: Set[str] = set(tokens_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def fuzzy_match(
    query: str,
    corpus: Sequence[CatalogItem],
    threshold: float = FUZZY_THRESHOLD,
    limit: int = FUZZY_LIMIT,
) -> List[CatalogItem]:
    """Items whose token-set Jaccard similarity to ``query`` is ``>= threshold``.

    Best matches first, at most ``limit`` items; scores are not returned.
    """
    if limit <= 0:
        return []
    query_tokens = tokenize(query)
    matches: List[Tuple[CatalogItem, float]] = []
    for item in corpus:
        score = jaccard_similarity(query_tokens, item_tokens(item))
        if score >= threshold:
            matches.append((item, score))
    matches.sort(key=lambda pair: -pair[1])
    return [item for item, _ in matches[:limit]]


def fuzzy_search_items(
    query: str,
    fetch_catalog: CatalogFetcher,
    threshold: float = FUZZY_THRESHOLD,
    limit: int = FUZZY_LIMIT,
    *,
    strict: bool = False,
) -> List[CatalogItem]:
    """:func:`fuzzy_match` over a fetched catalog, failing soft like :func:`find_similar_items`."""
    try:
        corpus = _fetch_corpus(fetch_catalog)
    except RetrievalError:
        logger.exception("Error in fuzzy search for query {!r}", query)
        if strict:
            raise
        return []
    return fuzzy_match(query, corpus, threshold=threshold, limit=limit)
