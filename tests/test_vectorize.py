import math

import pytest

from catalog_engine.vectorize import (
    build_tfidf_vector,
    cosine_similarity,
    document_vector,
    pairwise_vectors,
    term_frequencies,
)


def test_term_frequencies():
    assert term_frequencies(["luva", "luva", "látex"]) == pytest.approx({"luva": 2 / 3, "látex": 1 / 3})
    assert term_frequencies([]) == {}


def test_empty_document_gives_empty_vector():
    assert build_tfidf_vector([], [["seringa"]]) == {}


def test_single_document_corpus_uses_unsmoothed_idf():
    vec = build_tfidf_vector(["luva", "luva", "látex"], [["luva", "luva", "látex"]])
    assert vec["luva"] == pytest.approx(2 / 3 * math.log(1 / 2))
    assert vec["látex"] == pytest.approx(1 / 3 * math.log(1 / 2))


def test_missing_corpus_falls_back_to_the_document_itself():
    tokens = ["seringa", "agulha"]
    assert build_tfidf_vector(tokens) == build_tfidf_vector(tokens, [tokens])
    assert build_tfidf_vector(tokens, []) == build_tfidf_vector(tokens, [tokens])


def test_two_document_corpus_weights_only_shared_tokens():
    vec_a, vec_b = pairwise_vectors(["seringa", "luva"], ["seringa", "agulha"])
    assert vec_a["seringa"] == pytest.approx(0.5 * math.log(2 / 3))
    assert vec_a["luva"] == 0.0
    assert vec_b["agulha"] == 0.0


def test_self_similarity_is_one():
    vec = document_vector(["seringa", "descartável", "10ml", "seringa"])
    assert cosine_similarity(vec, vec) == pytest.approx(1.0)


def test_cosine_is_symmetric():
    a = document_vector(["seringa", "descartável", "10ml"])
    b = document_vector(["or1", "seringa", "descartável", "10ml", "acme"])
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))
    assert cosine_similarity(a, b) == pytest.approx(3 / math.sqrt(15))


def test_empty_or_zero_vectors_score_zero():
    vec = document_vector(["seringa"])
    assert cosine_similarity({}, vec) == 0.0
    assert cosine_similarity(vec, {}) == 0.0
    zero_a, zero_b = pairwise_vectors(["cadeira"], ["seringa"])
    assert cosine_similarity(zero_a, zero_b) == 0.0


def test_similarity_stays_in_unit_interval():
    a = build_tfidf_vector(["seringa", "luva"], [["seringa"], ["agulha"], ["gaze"], ["luva", "seringa"]])
    b = build_tfidf_vector(["seringa", "gaze"], [["seringa"], ["agulha"], ["gaze"], ["luva", "seringa"]])
    assert 0.0 <= cosine_similarity(a, b) <= 1.0
