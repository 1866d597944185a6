from __future__ import annotations

"""
History relationships between catalog items with similar texts.

Item-to-item similarity uses a two-document corpus ``[a, b]`` for the
IDF term, unlike the search ranker where each document stands alone.
Tokens shared by both items get weight and tokens unique to one item
get none, so the score measures overlap of the pair only.

Computation is pure; persisting the emitted edges is up to the caller
(see :meth:`catalog_engine.store.CatalogStore.create_history_relationships`).
"""

from typing import Iterable, List, Sequence, Set, Tuple

from loguru import logger

from .config import RELATIONSHIP_DECIMALS, RELATIONSHIP_THRESHOLD, CatalogItem, HistoryRelationship
from .normalize import item_tokens
from .vectorize import cosine_similarity, pairwise_vectors


def item_similarity(item_a: CatalogItem, item_b: CatalogItem) -> float:
    vec_a, vec_b = pairwise_vectors(item_tokens(item_a), item_tokens(item_b))
    return cosine_similarity(vec_a, vec_b)


def _relationship(item_id: str, related_id: str, similarity: float) -> HistoryRelationship:
    return HistoryRelationship(
        item_id=item_id,
        related_item_id=related_id,
        similarity_score=round(similarity, RELATIONSHIP_DECIMALS),
    )


def build_relationships(
    anchor: CatalogItem,
    candidates: Sequence[CatalogItem],
    threshold: float = RELATIONSHIP_THRESHOLD,
) -> List[HistoryRelationship]:
    """Edges ``anchor -> candidate`` for candidates at or above ``threshold``.

    The anchor itself is skipped when it appears among the candidates.
    """
    out: List[HistoryRelationship] = []
    for candidate in candidates:
        if candidate.id == anchor.id:
            continue
        similarity = item_similarity(anchor, candidate)
        if similarity >= threshold:
            out.append(_relationship(anchor.id, candidate.id, similarity))
    logger.debug("Item {}: {} related items out of {}", anchor.id, len(out), len(candidates))
    return out


def build_relationship_graph(
    items: Sequence[CatalogItem],
    threshold: float = RELATIONSHIP_THRESHOLD,
) -> List[HistoryRelationship]:
    """Compare every unordered pair once; each edge points from the earlier item."""
    out: List[HistoryRelationship] = []
    for i, item_a in enumerate(items):
        for item_b in items[i + 1:]:
            if item_a.id == item_b.id:
                continue
            similarity = item_similarity(item_a, item_b)
            if similarity >= threshold:
                out.append(_relationship(item_a.id, item_b.id, similarity))
    logger.info("Built {} relationships across {} items", len(out), len(items))
    return out


def _pair_key(rel: HistoryRelationship) -> Tuple[str, str]:
    a, b = rel.item_id, rel.related_item_id
    return (a, b) if a <= b else (b, a)


def dedupe_relationships(
    relationships: Iterable[HistoryRelationship],
    existing: Iterable[HistoryRelationship] = (),
) -> List[HistoryRelationship]:
    """Drop ``(B, A)`` when ``(A, B)`` is already present, first one wins."""
    seen: Set[Tuple[str, str]] = {_pair_key(r) for r in existing}
    out: List[HistoryRelationship] = []
    for rel in relationships:
        key = _pair_key(rel)
        if key in seen:
            continue
        seen.add(key)
        out.append(rel)
    return out
