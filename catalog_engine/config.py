from __future__ import annotations
"""
Configuration for the catalog similarity and viability engine.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Paths
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PROJECT_ROOT / "data"
CATALOG_SNAPSHOT_PATH = Path(
    os.getenv("CATALOG_ENGINE_CATALOG_PATH", str(DATA_DIR / "catalog_snapshot.csv"))
)
LOG_DIR = PROJECT_ROOT / "logs"

# Similarity search
RANK_LIMIT = int(os.getenv("CATALOG_ENGINE_RANK_LIMIT", "10"))
MIN_SIMILARITY = float(os.getenv("CATALOG_ENGINE_MIN_SIMILARITY", "0.1"))  # strict cutoff
SIMILARITY_DECIMALS = 2

# Fuzzy (Jaccard) fallback
FUZZY_THRESHOLD = float(os.getenv("CATALOG_ENGINE_FUZZY_THRESHOLD", "0.3"))  # inclusive cutoff
FUZZY_LIMIT = int(os.getenv("CATALOG_ENGINE_FUZZY_LIMIT", "20"))

# History relationships
RELATIONSHIP_THRESHOLD = float(os.getenv("CATALOG_ENGINE_RELATIONSHIP_THRESHOLD", "0.7"))
RELATIONSHIP_DECIMALS = 4

# Viability model
MODEL_VERSION = "1.0"
VIABILITY_THRESHOLD = 0.6
SCORE_DECIMALS = 4
NEUTRAL_SCORE = 0.5
MIN_DESCRIPTION_LENGTH = 10
MAX_REASONABLE_QUANTITY = 10_000
MIN_REASONABLE_UNIT_PRICE = 0.01
MAX_REASONABLE_UNIT_PRICE = 100_000

# Tokenizer
MIN_TOKEN_LENGTH = 3

# Portuguese + English stop words
STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with",
    "para", "com", "por", "em", "de", "da", "do", "das", "dos",
    "na", "no", "nas", "nos", "um", "uma", "uns", "umas",
    "ou", "mas", "que", "como", "ser", "ter", "estar",
})

# Feature vocabularies
UNIT_WORDS = ("mg", "ml", "kg", "g", "cm", "mm", "unid", "und", "pc", "pç")

MEDICAL_TERMS = (
    "medicamento", "remedio", "remédio", "droga", "farmaco", "fármaco", "tratamento",
    "comprimido", "capsula", "cápsula", "ampola", "xarope", "pomada",
    "injetavel", "injetável", "seringa", "agulha", "curativo",
    "hospitalar", "cirurgico", "cirúrgico",
)

TECHNICAL_TERMS = (
    "equipamento", "aparelho", "instrumento", "dispositivo",
    "maquina", "máquina", "ferramenta", "componente", "sensor", "monitor",
)


# Pydantic schemas
class _Record(BaseModel):
    """Accepts both snake_case and the application's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemKind(str, Enum):
    sample = "sample"
    process = "process"


class CatalogItem(_Record):
    id: str
    code: str
    description: str = ""
    brand: Optional[str] = None
    batch: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    estimated_price: Optional[float] = None


class SampleItem(_Record):
    id: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    brand: Optional[str] = None
    batch: Optional[str] = None
    quantity: int = 0
    result: Optional[str] = None  # aprovado, reprovado, pendente
    reason: Optional[str] = None


class ProcessItem(_Record):
    id: Optional[str] = None
    code: Optional[str] = None
    description: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    batch: Optional[str] = None
    awarded_quantity: int = 0
    committed_quantity: int = 0
    # decimals arrive as strings from the relational store
    unit_price: Optional[Any] = None
    total_value: Optional[Any] = None


class MlPrediction(_Record):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        protected_namespaces=(),
    )

    score: float = Field(ge=0.0, le=1.0)
    viable: bool
    model_version: str = MODEL_VERSION
    features: Dict[str, Any] = Field(default_factory=dict)
    sample_item_id: Optional[str] = None
    process_item_id: Optional[str] = None


class HistoryRelationship(_Record):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    item_id: str
    related_item_id: str
    similarity_score: float


class SimilarItem(_Record):
    item: CatalogItem
    similarity: float
    sample_history: List[Dict[str, Any]] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
