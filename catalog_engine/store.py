from __future__ import annotations

"""
In-memory stand-in for the application's relational store.

The engine itself never fetches or persists anything; the API and CLI
use this store as the collaborator that supplies catalog snapshots
and keeps predictions and history relationships.
"""

import threading
import uuid
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from .config import CatalogItem, HistoryRelationship, ItemKind, MlPrediction, SampleItem
from .relationships import dedupe_relationships


class CatalogStore:
    def __init__(self, catalog_items: Iterable[CatalogItem] = ()):
        self._lock = threading.Lock()
        self._catalog: Dict[str, CatalogItem] = {item.id: item for item in catalog_items}
        self._samples: Dict[str, SampleItem] = {}
        self._predictions: Dict[Tuple[ItemKind, str], MlPrediction] = {}
        self._relationships: List[HistoryRelationship] = []

    # catalog -----------------------------------------------------------------

    def get_catalog_items(self) -> List[CatalogItem]:
        with self._lock:
            return list(self._catalog.values())

    def get_catalog_item(self, item_id: str) -> Optional[CatalogItem]:
        with self._lock:
            return self._catalog.get(item_id)

    def add_catalog_item(self, item: CatalogItem) -> CatalogItem:
        with self._lock:
            self._catalog[item.id] = item
        return item

    # samples -----------------------------------------------------------------

    def create_sample_item(self, item: SampleItem) -> SampleItem:
        if item.id is None:
            item = item.model_copy(update={"id": str(uuid.uuid4())})
        with self._lock:
            self._samples[item.id] = item
        return item

    def get_sample_item(self, item_id: str) -> Optional[SampleItem]:
        with self._lock:
            return self._samples.get(item_id)

    # predictions -------------------------------------------------------------

    def create_ml_prediction(self, prediction: MlPrediction) -> MlPrediction:
        if prediction.process_item_id is not None:
            key = (ItemKind.process, prediction.process_item_id)
        elif prediction.sample_item_id is not None:
            key = (ItemKind.sample, prediction.sample_item_id)
        else:
            raise ValueError("Prediction has neither sample_item_id nor process_item_id")
        with self._lock:
            self._predictions[key] = prediction
        return prediction

    def get_ml_prediction(self, item_id: str, kind: ItemKind) -> Optional[MlPrediction]:
        with self._lock:
            return self._predictions.get((kind, item_id))

    # history relationships ---------------------------------------------------

    def create_history_relationships(self, relationships: Iterable[HistoryRelationship]) -> List[HistoryRelationship]:
        """Persist new edges, skipping pairs already stored in either direction."""
        with self._lock:
            fresh = dedupe_relationships(relationships, existing=self._relationships)
            self._relationships.extend(fresh)
        logger.info("Stored {} new history relationships", len(fresh))
        return fresh

    def get_history_relationships(self, item_id: str) -> List[HistoryRelationship]:
        with self._lock:
            return [
                r for r in self._relationships
                if r.item_id == item_id or r.related_item_id == item_id
            ]
