"""Tests for keyword filtering utilities."""

from topic_feeds.adapters.sources.filters import matches_keywords, normalize


def test_normalize_strips_accents_and_case():
    """Test accent- and case-folding."""
    assert normalize("Café") == normalize("cafe") == "cafe"
    assert normalize("ELEIÇÕES") == "eleicoes"
    assert normalize("São Paulo") == "sao paulo"


def test_normalize_empty():
    """Test empty and missing input."""
    assert normalize("") == ""
    assert normalize(None) == ""


def test_matches_keywords_empty_keywords():
    """Empty keywords means no filtering."""
    assert matches_keywords("Any title", [])
    assert matches_keywords("", [])
    assert matches_keywords(None, ())


def test_matches_keywords_case_and_accent_insensitive():
    """Test matching ignores case and diacritics on both sides."""
    assert matches_keywords("Resultado das Eleições 2024", ["eleicoes"])
    assert matches_keywords("resultado das eleicoes", ["ELEIÇÕES"])
    assert matches_keywords("AI breakthrough", ["ai"])


def test_matches_keywords_substring_not_token():
    """Keywords match as substrings, not whole words."""
    assert matches_keywords("He said so", ["ai"])
    assert not matches_keywords("Sports update", ["ai"])


def test_matches_keywords_any_keyword():
    """Test matching with multiple keywords."""
    keywords = ["economia", "inflação", "juros"]
    
    assert matches_keywords("Banco central mantém juros", keywords)
    assert matches_keywords("Inflacao desacelera", keywords)
    assert not matches_keywords("Time vence clássico", keywords)


def test_matches_keywords_empty_text():
    """Test with empty text."""
    assert not matches_keywords("", ["ai"])
    assert not matches_keywords(None, ["ai"])
