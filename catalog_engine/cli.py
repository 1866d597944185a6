# catalog_engine/cli.py
"""
Batch runner for the catalog engine, without starting FastAPI.

- similar:       cosine-ranked catalog items for a query
- fuzzy:         Jaccard fallback lookup for a query
- score:         viability predictions for a sheet of sample/process items
- relationships: history relationships across a whole catalog
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger

from catalog_engine.catalog_build import load_catalog_items, load_item_records
from catalog_engine.config import (
    CATALOG_SNAPSHOT_PATH,
    FUZZY_LIMIT,
    FUZZY_THRESHOLD,
    LOG_DIR,
    RANK_LIMIT,
    RELATIONSHIP_THRESHOLD,
)
from catalog_engine.features import resolve_item_kind
from catalog_engine.relationships import build_relationship_graph
from catalog_engine.retrieval import fuzzy_match, rank_items
from catalog_engine.viability import generate_batch_predictions


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(LOG_DIR / "catalog_engine.log", rotation="10 MB", retention=5, level="DEBUG")


def _write_csv(df: pd.DataFrame, out_path: Path) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    print(f"Wrote {len(df)} rows to {out_path}")


def cmd_similar(args: argparse.Namespace) -> int:
    catalog = load_catalog_items(Path(args.catalog))
    ranked = rank_items(args.query, catalog, limit=args.limit)
    if not ranked:
        print("No similar items found")
    for item, similarity in ranked:
        print(f"{similarity:.2f}  {item.code}  {item.description}")
    return 0


def cmd_fuzzy(args: argparse.Namespace) -> int:
    catalog = load_catalog_items(Path(args.catalog))
    for item in fuzzy_match(args.query, catalog, threshold=args.threshold, limit=args.limit):
        print(f"{item.code}  {item.description}")
    return 0


def predictions_frame(records: Sequence[dict]) -> pd.DataFrame:
    """One row per input record, in input order."""
    predictions = generate_batch_predictions(records)
    rows = []
    for record, pred in zip(records, predictions):
        rows.append({
            "id": record.get("id"),
            "kind": resolve_item_kind(record).value,
            "score": pred.score,
            "viable": pred.viable,
            "model_version": pred.model_version,
        })
    return pd.DataFrame(rows, columns=["id", "kind", "score", "viable", "model_version"])


def cmd_score(args: argparse.Namespace) -> int:
    records = load_item_records(Path(args.items))
    _write_csv(predictions_frame(records), Path(args.out))
    return 0


def cmd_relationships(args: argparse.Namespace) -> int:
    catalog = load_catalog_items(Path(args.catalog))
    rels = build_relationship_graph(catalog, threshold=args.threshold)
    df = pd.DataFrame(
        [(r.item_id, r.related_item_id, r.similarity_score) for r in rels],
        columns=["item_id", "related_item_id", "similarity_score"],
    )
    _write_csv(df, Path(args.out))
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="catalog-engine")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("similar", help="rank catalog items by TF-IDF cosine similarity")
    p.add_argument("--catalog", default=str(CATALOG_SNAPSHOT_PATH))
    p.add_argument("--query", required=True)
    p.add_argument("--limit", type=int, default=RANK_LIMIT)
    p.set_defaults(func=cmd_similar)

    p = sub.add_parser("fuzzy", help="Jaccard token-set lookup")
    p.add_argument("--catalog", default=str(CATALOG_SNAPSHOT_PATH))
    p.add_argument("--query", required=True)
    p.add_argument("--threshold", type=float, default=FUZZY_THRESHOLD)
    p.add_argument("--limit", type=int, default=FUZZY_LIMIT)
    p.set_defaults(func=cmd_fuzzy)

    p = sub.add_parser("score", help="viability predictions for sample/process rows")
    p.add_argument("--items", required=True, help="CSV/Excel/Parquet of items")
    p.add_argument("--out", default="artifacts/predictions.csv")
    p.set_defaults(func=cmd_score)

    p = sub.add_parser("relationships", help="history relationships across the catalog")
    p.add_argument("--catalog", default=str(CATALOG_SNAPSHOT_PATH))
    p.add_argument("--out", default="artifacts/relationships.csv")
    p.add_argument("--threshold", type=float, default=RELATIONSHIP_THRESHOLD)
    p.set_defaults(func=cmd_relationships)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
