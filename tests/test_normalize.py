from catalog_engine.normalize import item_text, item_tokens, tokenize
from catalog_engine.config import CatalogItem


def test_empty_and_punctuation_yield_no_tokens():
    assert tokenize("") == []
    assert tokenize(None) == []
    assert tokenize("!!! ,,, ... ??") == []


def test_lowercases_drops_short_tokens_and_stop_words():
    tokens = tokenize("Seringa Descartável de 10ml, para uso HOSPITALAR")
    assert tokens == ["seringa", "descartável", "10ml", "uso", "hospitalar"]


def test_english_stop_words_are_dropped():
    assert tokenize("The syringe and the needle") == ["syringe", "needle"]


def test_accents_are_preserved_and_composed():
    assert tokenize("descartável") == ["descartável"]
    assert tokenize("Pç Algodão") == ["algodão"]
    assert tokenize("descarta\u0301vel") == ["descartável"]


def test_duplicates_are_kept_for_term_frequency():
    assert tokenize("luva luva látex") == ["luva", "luva", "látex"]


def test_retokenizing_joined_output_is_stable():
    tokens = tokenize("Kit cirúrgico (estéril) c/ 3 pinças - x-ray")
    assert tokenize(" ".join(tokens)) == tokens
    assert "ray" in tokens


def test_item_text_handles_missing_brand():
    assert item_text("OR1", "seringa", None) == "OR1 seringa "
    item = CatalogItem(id="1", code="OR1", description="seringa descartável", brand="Acme")
    assert item_tokens(item) == ["or1", "seringa", "descartável", "acme"]


def test_non_latin1_symbols_split_tokens():
    assert tokenize("seringa 10cm² kit") == ["seringa", "10cm", "kit"]
    assert tokenize("nº 123 cœur") == ["123"]
