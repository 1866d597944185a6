from __future__ import annotations

"""
Feature extraction for the viability model.

Sample items (from a bidding's sample submission) and process items
(awarded lines of a procurement process) are scored by the same
model.  The kind of item is decided once, at the boundary, by
:func:`resolve_item_kind` / :func:`coerce_item`; :func:`extract_features`
then branches on the explicit :class:`~catalog_engine.config.ItemKind`
rather than probing for fields.

Extraction inspects fields only: missing values become ``False`` /
``0`` and nothing here raises for a well-typed record.
"""

import re
from typing import Any, Dict, Mapping, Tuple, Union

from .config import (
    MEDICAL_TERMS,
    TECHNICAL_TERMS,
    UNIT_WORDS,
    ItemKind,
    ProcessItem,
    SampleItem,
)

Item = Union[SampleItem, ProcessItem]
FeatureSet = Dict[str, Any]


def _word_pattern(words) -> re.Pattern:
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


NUMBER_RE = re.compile(r"\d")
# a unit may follow a number directly ("500mg") but not sit inside a word
UNITS_RE = re.compile(
    r"(?<![^\W\d_])(?:" + "|".join(re.escape(u) for u in UNIT_WORDS) + r")\b",
    re.IGNORECASE,
)
MEDICAL_RE = _word_pattern(MEDICAL_TERMS)
TECHNICAL_RE = _word_pattern(TECHNICAL_TERMS)
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ---------------------------
# Boundary: item kind
# ---------------------------

def resolve_item_kind(record: Union[Mapping[str, Any], Item]) -> ItemKind:
    """Process items are the ones carrying an awarded quantity."""
    if isinstance(record, ProcessItem):
        return ItemKind.process
    if isinstance(record, SampleItem):
        return ItemKind.sample
    if "awardedQuantity" in record or "awarded_quantity" in record:
        return ItemKind.process
    return ItemKind.sample


def coerce_item(record: Union[Mapping[str, Any], Item]) -> Tuple[Item, ItemKind]:
    """Validate a raw record into its typed model.

    Raises ``pydantic.ValidationError`` for records that do not fit the
    resolved kind.
    """
    kind = resolve_item_kind(record)
    if isinstance(record, (SampleItem, ProcessItem)):
        return record, kind
    model = ProcessItem if kind is ItemKind.process else SampleItem
    return model.model_validate(dict(record)), kind


# ---------------------------
# Helpers
# ---------------------------

def parse_number(value: Any) -> float:
    """Lenient numeric parse.

    ``"12,50"`` -> 12.5, ``"1.234,56"`` -> 1234.56, ``"abc"`` / ``None`` -> 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if value == value else 0.0  # NaN
    text = str(value).strip()
    if "," in text:
        if "." in text and text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        elif "." not in text and text.count(",") == 1:
            text = text.replace(",", ".")
        else:
            text = text.replace(",", "")
    match = _LEADING_NUMBER_RE.match(text)
    return float(match.group(0)) if match else 0.0


def text_features(description: str) -> FeatureSet:
    return {
        "descriptionLength": len(description),
        "hasNumbers": bool(NUMBER_RE.search(description)),
        "hasUnits": bool(UNITS_RE.search(description)),
        "hasMedicalTerms": bool(MEDICAL_RE.search(description)),
        "hasTechnicalTerms": bool(TECHNICAL_RE.search(description)),
    }


# ---------------------------
# Extraction
# ---------------------------

def extract_features(item: Item, kind: ItemKind) -> FeatureSet:
    """Flat feature set for one item.

    ``quantity`` is only defined for sample items; process items record
    their awarded quantity and pricing instead.
    """
    quantity = getattr(item, "quantity", 0) or 0
    features: FeatureSet = {
        "hasQuantity": bool(quantity),
        "quantity": quantity,
        "hasDescription": bool(item.description or item.code),
        "hasBrand": bool(item.brand),
    }

    if kind is ItemKind.process:
        unit_price = parse_number(item.unit_price)
        total_value = parse_number(item.total_value)
        features["awardedQuantity"] = item.awarded_quantity or 0
        features["unitPrice"] = unit_price
        features["totalValue"] = total_value
        features["hasValidPricing"] = unit_price > 0 and total_value > 0

    # both kinds carry a batch; only samples have a result
    features["hasBatch"] = bool(item.batch)
    features["hasResult"] = bool(getattr(item, "result", None))

    features.update(text_features(item.description or ""))
    return features
