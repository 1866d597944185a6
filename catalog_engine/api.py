from __future__ import annotations

"""
FastAPI application exposing the similarity and viability engine.

- ``GET /api/history/similar``: cosine-ranked catalog items for a free-text query
- ``GET /api/history/fuzzy``: cheaper Jaccard fallback lookup
- ``GET /api/ml/prediction/{item_id}``: stored viability prediction for a sample or process item
- ``POST /api/samples/items``: register a sample item and score it (scoring never blocks creation)
- ``POST /api/catalog/{item_id}/relationships``: compute and store history relationships
"""

from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .catalog_build import load_catalog_items
from .config import (
    CATALOG_SNAPSHOT_PATH,
    FUZZY_LIMIT,
    FUZZY_THRESHOLD,
    RANK_LIMIT,
    RELATIONSHIP_THRESHOLD,
    CatalogItem,
    HealthResponse,
    HistoryRelationship,
    ItemKind,
    MlPrediction,
    SampleItem,
    SimilarItem,
)
from .relationships import build_relationships
from .retrieval import find_similar_items, fuzzy_search_items
from .store import CatalogStore
from .viability import generate_prediction

app = FastAPI(title="Catalog Similarity Engine")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_store: Optional[CatalogStore] = None


def get_store() -> CatalogStore:
    """Process-wide store, seeded from the catalog snapshot on first use."""
    global _store
    if _store is None:
        items: List[CatalogItem] = []
        if CATALOG_SNAPSHOT_PATH.exists():
            items = load_catalog_items(CATALOG_SNAPSHOT_PATH)
        else:
            logger.warning("Catalog snapshot {} not found; starting with an empty catalog", CATALOG_SNAPSHOT_PATH)
        _store = CatalogStore(items)
    return _store


def _required_query(q: Optional[str]) -> str:
    query = (q or "").strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query parameter 'q' is required")
    return query


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.get("/api/history/similar", response_model=List[SimilarItem])
def similar_items(
    q: Optional[str] = None,
    limit: int = Query(RANK_LIMIT, ge=1, le=100),
    store: CatalogStore = Depends(get_store),
):
    query = _required_query(q)
    return find_similar_items(query, store.get_catalog_items, limit=limit)


@app.get("/api/history/fuzzy", response_model=List[CatalogItem])
def fuzzy_items(
    q: Optional[str] = None,
    threshold: float = Query(FUZZY_THRESHOLD, ge=0.0, le=1.0),
    limit: int = Query(FUZZY_LIMIT, ge=1, le=100),
    store: CatalogStore = Depends(get_store),
):
    query = _required_query(q)
    return fuzzy_search_items(query, store.get_catalog_items, threshold=threshold, limit=limit)


@app.get("/api/ml/prediction/{item_id}", response_model=MlPrediction)
def ml_prediction(
    item_id: str,
    type: Optional[str] = None,
    store: CatalogStore = Depends(get_store),
):
    prediction = None
    if type in (ItemKind.sample.value, ItemKind.process.value):
        prediction = store.get_ml_prediction(item_id, ItemKind(type))
    if prediction is None:
        raise HTTPException(status_code=404, detail="Prediction not found")
    return prediction


@app.post("/api/samples/items", response_model=SampleItem, status_code=201)
def create_sample_item(item: SampleItem, store: CatalogStore = Depends(get_store)):
    created = store.create_sample_item(item)
    try:
        store.create_ml_prediction(generate_prediction(created))
    except Exception:
        # continue without a prediction
        logger.exception("Error storing prediction for sample item {}", created.id)
    return created


@app.post("/api/catalog/{item_id}/relationships", response_model=List[HistoryRelationship])
def create_relationships(
    item_id: str,
    threshold: float = Query(RELATIONSHIP_THRESHOLD, ge=0.0, le=1.0),
    store: CatalogStore = Depends(get_store),
):
    anchor = store.get_catalog_item(item_id)
    if anchor is None:
        raise HTTPException(status_code=404, detail="Catalog item not found")
    relationships = build_relationships(anchor, store.get_catalog_items(), threshold=threshold)
    return store.create_history_relationships(relationships)
