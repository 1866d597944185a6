from __future__ import annotations

"""
Rule-based viability scoring for sample and process items.

Each rule looks at the extracted feature set and grants up to its
weight.  The accumulated credit is divided by the fixed total of all
rule weights (1.0), whether or not a rule could apply to the item's
kind, so sample items can never collect the pricing credit.  An item
is viable when the rounded score reaches ``VIABILITY_THRESHOLD``.

Scoring never blocks the caller: any failure while coercing the
record or extracting features is logged and answered with a neutral
prediction.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger

from .config import (
    MAX_REASONABLE_QUANTITY,
    MAX_REASONABLE_UNIT_PRICE,
    MIN_DESCRIPTION_LENGTH,
    MIN_REASONABLE_UNIT_PRICE,
    MODEL_VERSION,
    NEUTRAL_SCORE,
    SCORE_DECIMALS,
    VIABILITY_THRESHOLD,
    ItemKind,
    MlPrediction,
    ProcessItem,
    SampleItem,
)
from .features import FeatureSet, Item, coerce_item, extract_features, resolve_item_kind


@dataclass(frozen=True)
class Rule:
    name: str
    weight: float
    credit: Callable[[FeatureSet], float]


def _flag(name: str, weight: float) -> Callable[[FeatureSet], float]:
    return lambda f: weight if f.get(name) else 0.0


def _quantity_credit(f: FeatureSet) -> float:
    quantity = f.get("quantity", 0)
    if 0 < quantity <= MAX_REASONABLE_QUANTITY:
        return 0.10
    if quantity > MAX_REASONABLE_QUANTITY:
        return 0.05  # large quantities are less viable
    return 0.0


def _pricing_credit(f: FeatureSet) -> float:
    if not f.get("hasValidPricing"):
        return 0.0
    credit = 0.10
    if MIN_REASONABLE_UNIT_PRICE < f.get("unitPrice", 0) < MAX_REASONABLE_UNIT_PRICE:
        credit += 0.05
    return credit


RULES: tuple[Rule, ...] = (
    Rule("has_quantity", 0.20, _flag("hasQuantity", 0.20)),
    Rule("has_description", 0.20, _flag("hasDescription", 0.20)),
    Rule("has_brand", 0.10, _flag("hasBrand", 0.10)),
    Rule(
        "description_length",
        0.10,
        lambda f: 0.10 if f.get("descriptionLength", 0) > MIN_DESCRIPTION_LENGTH else 0.0,
    ),
    Rule("reasonable_quantity", 0.10, _quantity_credit),
    Rule("has_units", 0.10, _flag("hasUnits", 0.10)),
    Rule(
        "domain_keywords",
        0.05,
        lambda f: 0.05 if f.get("hasMedicalTerms") or f.get("hasTechnicalTerms") else 0.0,
    ),
    Rule("valid_pricing", 0.15, _pricing_credit),
)

MAX_SCORE = sum(rule.weight for rule in RULES)


def calculate_viability_score(features: FeatureSet) -> float:
    """Weighted rule credit over ``MAX_SCORE``, clamped to ``[0, 1]``."""
    if MAX_SCORE <= 0:
        return NEUTRAL_SCORE
    score = sum(rule.credit(features) for rule in RULES)
    return max(0.0, min(score / MAX_SCORE, 1.0))


def neutral_prediction() -> MlPrediction:
    return MlPrediction(score=NEUTRAL_SCORE, viable=False, model_version=MODEL_VERSION, features={})


def _item_ref(record: Any) -> Tuple[Optional[str], ItemKind]:
    """Id and kind of a record, read without validating it."""
    if isinstance(record, (SampleItem, ProcessItem)):
        return record.id, resolve_item_kind(record)
    if isinstance(record, Mapping):
        item_id = record.get("id")
        return (None if item_id is None else str(item_id)), resolve_item_kind(record)
    return None, ItemKind.sample


def _with_item_id(prediction: MlPrediction, item_id: Optional[str], kind: ItemKind) -> MlPrediction:
    if item_id is None:
        return prediction
    if kind is ItemKind.process:
        return prediction.model_copy(update={"process_item_id": item_id})
    return prediction.model_copy(update={"sample_item_id": item_id})


def generate_prediction(record: Union[Mapping[str, Any], Item]) -> MlPrediction:
    """Score one sample or process item.

    Accepts a typed item or a raw mapping (snake_case or camelCase
    keys).  Returns the neutral prediction on any failure; either way
    the prediction is linked to the record's id.
    """
    item_id, kind = _item_ref(record)
    try:
        item, _ = coerce_item(record)
        features = extract_features(item, kind)
        score = round(calculate_viability_score(features), SCORE_DECIMALS)
        prediction = MlPrediction(
            score=score,
            viable=score >= VIABILITY_THRESHOLD,
            model_version=MODEL_VERSION,
            features=features,
        )
    except Exception:
        logger.exception("Error generating viability prediction; using neutral default")
        prediction = neutral_prediction()
    return _with_item_id(prediction, item_id, kind)


def generate_batch_predictions(records: Sequence[Union[Mapping[str, Any], Item]]) -> List[MlPrediction]:
    """Score a mixed batch of sample and process items, preserving input order."""
    predictions = [generate_prediction(r) for r in records]
    viable = sum(1 for p in predictions if p.viable)
    logger.info("Scored {} items ({} viable)", len(predictions), viable)
    return predictions
