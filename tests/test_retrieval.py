import pytest

from catalog_engine.config import CatalogItem, SimilarItem
from catalog_engine.retrieval import (
    RetrievalError,
    find_similar_items,
    fuzzy_match,
    fuzzy_search_items,
    jaccard_similarity,
    rank_items,
)


def _broken_fetch():
    raise ConnectionError("database unavailable")


def test_exact_product_ranks_first_and_unrelated_is_excluded(catalog):
    ranked = rank_items("seringa descartável 10ml", catalog[:2])
    assert [item.code for item, _ in ranked] == ["OR1"]
    assert ranked[0][1] == 0.77


def test_identical_text_scores_one():
    item = CatalogItem(id="9", code="seringa", description="descartável 10ml")
    assert rank_items("seringa descartável 10ml", [item])[0][1] == 1.0


def test_results_sorted_non_increasing_and_limited(catalog):
    ranked = rank_items("seringa descartável", catalog, limit=2)
    sims = [s for _, s in ranked]
    assert len(ranked) <= 2
    assert sims == sorted(sims, reverse=True)
    assert {item.code for item, _ in ranked} == {"OR1", "SR5"}


def test_ties_keep_corpus_order():
    a = CatalogItem(id="a", code="AAA", description="gaze estéril")
    b = CatalogItem(id="b", code="BBB", description="gaze estéril")
    ranked = rank_items("gaze estéril", [a, b])
    assert [item.id for item, _ in ranked] == ["a", "b"]


def test_min_similarity_is_a_strict_cutoff(catalog):
    assert rank_items("seringa descartável 10ml", catalog, min_similarity=0.8) == []
    item = CatalogItem(id="9", code="seringa", description="descartável")
    assert rank_items("seringa descartável", [item], min_similarity=1.0) == []


def test_empty_query_or_corpus_ranks_nothing(catalog):
    assert rank_items("", catalog) == []
    assert rank_items("de da do", catalog) == []
    assert rank_items("seringa", []) == []
    assert rank_items("seringa", catalog, limit=0) == []


def test_find_similar_items_wraps_results(catalog):
    results = find_similar_items("seringa descartável 10ml", lambda: catalog, limit=5)
    assert all(isinstance(r, SimilarItem) for r in results)
    assert results[0].item.code == "OR1"
    assert results[0].sample_history == []


def test_find_similar_items_fails_soft_on_fetch_error():
    assert find_similar_items("seringa", _broken_fetch) == []


def test_find_similar_items_strict_raises_retrieval_error():
    with pytest.raises(RetrievalError):
        find_similar_items("seringa", _broken_fetch, strict=True)


def test_jaccard_bounds_and_symmetry():
    a, b = ["luva", "látex"], ["luva", "nitrílica", "tamanho"]
    assert jaccard_similarity(a, b) == pytest.approx(1 / 4)
    assert jaccard_similarity(a, b) == jaccard_similarity(b, a)
    assert jaccard_similarity(a, a) == 1.0
    assert jaccard_similarity([], []) == 0.0
    assert jaccard_similarity(["luva", "luva"], ["luva"]) == 1.0


def test_fuzzy_match_orders_and_returns_items_only():
    items = [
        CatalogItem(id="1", code="L2", description="luva látex"),
        CatalogItem(id="2", code="L1", description="luva nitrílica tamanho"),
        CatalogItem(id="3", code="C1", description="cadeira"),
    ]
    matches = fuzzy_match("luva nitrílica", items)
    assert [m.id for m in matches] == ["2", "1"]
    assert all(isinstance(m, CatalogItem) for m in matches)


def test_fuzzy_threshold_is_inclusive():
    item = CatalogItem(id="1", code="L2", description="luva látex")
    # {luva, nitrílica} vs {luva, látex}: 1 / 3
    assert fuzzy_match("luva nitrílica", [item], threshold=1 / 3) == [item]
    assert fuzzy_match("luva nitrílica", [item], threshold=0.34) == []


def test_fuzzy_limit():
    items = [CatalogItem(id=str(i), code="GZ", description="gaze estéril") for i in range(30)]
    assert len(fuzzy_match("gaze estéril", items)) == 20
    assert len(fuzzy_match("gaze estéril", items, limit=5)) == 5


def test_fuzzy_search_items_fails_soft():
    assert fuzzy_search_items("luva", _broken_fetch) == []
    with pytest.raises(RetrievalError):
        fuzzy_search_items("luva", _broken_fetch, strict=True)
