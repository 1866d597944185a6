"""
Item similarity and viability scoring for a procurement catalog.

This package ranks catalog items by textual similarity to a query or
to each other (TF-IDF cosine, with a Jaccard fallback) and scores
sample and process items with a rule-based viability model.  Every
engine function is a pure computation over the records it is given;
loading snapshots and keeping results is left to ``catalog_build``,
``store`` and the thin ``api`` / ``cli`` surfaces.  There are no
side-effects on import.
"""
