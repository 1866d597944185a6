import pytest

from catalog_engine.config import HistoryRelationship, ItemKind, MlPrediction, SampleItem
from catalog_engine.store import CatalogStore


def test_catalog_lookup(catalog):
    store = CatalogStore(catalog)
    assert len(store.get_catalog_items()) == 4
    assert store.get_catalog_item("1").code == "OR1"
    assert store.get_catalog_item("missing") is None


def test_sample_items_get_an_id():
    store = CatalogStore()
    created = store.create_sample_item(SampleItem(quantity=1))
    assert created.id
    assert store.get_sample_item(created.id) == created


def test_predictions_are_keyed_by_kind():
    store = CatalogStore()
    store.create_ml_prediction(MlPrediction(score=0.7, viable=True, sample_item_id="x"))
    assert store.get_ml_prediction("x", ItemKind.sample).score == 0.7
    assert store.get_ml_prediction("x", ItemKind.process) is None


def test_prediction_without_item_id_is_rejected():
    with pytest.raises(ValueError):
        CatalogStore().create_ml_prediction(MlPrediction(score=0.5, viable=False))


def test_relationships_are_stored_once_per_pair():
    store = CatalogStore()
    forward = HistoryRelationship(item_id="1", related_item_id="2", similarity_score=0.9)
    reverse = HistoryRelationship(item_id="2", related_item_id="1", similarity_score=0.9)
    assert store.create_history_relationships([forward]) == [forward]
    assert store.create_history_relationships([reverse]) == []
    assert store.get_history_relationships("2") == [forward]
