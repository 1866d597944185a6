from __future__ import annotations

"""
Load catalog snapshots and item spreadsheets into typed records.

Spreadsheets exported from the procurement application use either
Portuguese or English headers.  Columns are mapped to the canonical
schema, blank cells are dropped so model defaults apply, and each
row is validated into a :class:`~catalog_engine.config.CatalogItem`
(or, for scoring, kept as a raw record dict for the viability model).
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from loguru import logger

from .config import CATALOG_SNAPSHOT_PATH, CatalogItem


# ---------------------------
# Column detection / standardisation
# ---------------------------

COLUMN_CANDIDATES: Dict[str, List[str]] = {
    "id": ["id", "item_id", "ID"],
    "code": ["code", "Código", "Codigo", "cod"],
    "description": ["description", "Descrição", "Descricao", "desc"],
    "brand": ["brand", "Marca"],
    "batch": ["batch", "Lote"],
    "category": ["category", "Categoria"],
    "unit": ["unit", "Unidade"],
    "estimated_price": ["estimated_price", "estimatedPrice", "Preço Estimado", "Preco Estimado"],
    "quantity": ["quantity", "Quantidade", "qtd"],
    "result": ["result", "Resultado"],
    "awarded_quantity": ["awarded_quantity", "awardedQuantity", "Quantidade Arrematada"],
    "committed_quantity": ["committed_quantity", "committedQuantity", "Quantidade Empenhada"],
    "unit_price": ["unit_price", "unitPrice", "Valor Unitário", "Valor Unitario"],
    "total_value": ["total_value", "totalValue", "Valor Total"],
    "model": ["model", "Modelo"],
}


def _standardise_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename columns to the canonical snake_case schema.  Exact header
    matches win over case-insensitive ones; unknown columns are kept.
    """
    col_map: Dict[str, str] = {}
    lower_to_original = {str(c).lower(): c for c in df.columns}

    for canon, candidates in COLUMN_CANDIDATES.items():
        for candidate in candidates:
            if candidate in df.columns:
                col_map[candidate] = canon
                break
            cand_lower = candidate.lower()
            if cand_lower in lower_to_original:
                col_map[lower_to_original[cand_lower]] = canon
                break

    logger.debug("Standardising columns with map: {}", col_map)
    return df.rename(columns=col_map)


def read_table(path: Path) -> pd.DataFrame:
    """Read CSV, Excel or Parquet by file extension."""
    ext = path.suffix.lower()
    if ext in {".xlsx", ".xls"}:
        return pd.read_excel(path)
    if ext == ".parquet":
        return pd.read_parquet(path)
    return pd.read_csv(path)


TEXT_FIELDS = ("id", "code", "description", "brand", "batch", "category", "unit", "result", "model")


def _clean_record(row: Dict[str, Any]) -> Dict[str, Any]:
    """Drop blank/NaN cells so model defaults apply; text fields as strings."""
    out: Dict[str, Any] = {}
    for key, value in row.items():
        if value is None or (isinstance(value, float) and pd.isna(value)):
            continue
        if isinstance(value, str) and not value.strip():
            continue
        out[key] = value
    for key in TEXT_FIELDS:
        if key in out:
            out[key] = str(out[key]).strip()
    return out


def dataframe_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    df = _standardise_columns(df)
    return [_clean_record(row) for row in df.to_dict(orient="records")]


# ---------------------------
# Catalog
# ---------------------------

def catalog_items_from_df(df: pd.DataFrame) -> List[CatalogItem]:
    """
    Validate rows into :class:`CatalogItem`.  Rows without a code are
    skipped; rows without an id use their code as id.
    """
    items: List[CatalogItem] = []
    skipped = 0
    for record in dataframe_to_records(df):
        if not record.get("code"):
            skipped += 1
            continue
        record.setdefault("id", record["code"])
        items.append(CatalogItem.model_validate(record))
    if skipped:
        logger.warning("Skipped {} catalog rows without a code", skipped)
    return items


def load_catalog_items(path: Optional[Path] = None) -> List[CatalogItem]:
    """Load and validate the catalog snapshot at ``path``."""
    path = Path(path or CATALOG_SNAPSHOT_PATH)
    logger.info("Loading catalog snapshot from {}", path)
    items = catalog_items_from_df(read_table(path))
    logger.info("Loaded catalog snapshot with {} items", len(items))
    return items


def load_item_records(path: Path) -> List[Dict[str, Any]]:
    """Sample or process rows as plain dicts for :func:`generate_batch_predictions`."""
    logger.info("Loading items from {}", path)
    records = dataframe_to_records(read_table(Path(path)))
    logger.info("Loaded {} item rows", len(records))
    return records
