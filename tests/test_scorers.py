"""Tests des scorers de similarité."""

import pytest

from devismatch.config import ConfigError, MatchConfig
from devismatch.matching.scorers import prepare_name, score_names


def test_score_names_levenshtein() -> None:
    assert score_names("abc", "abc") == 1.0
    assert score_names("abc", "abd", "levenshtein") == pytest.approx(2 / 3)


def test_score_names_fuzzy_ratio_scaled() -> None:
    assert score_names("hello", "hello", "fuzzy_ratio") == 1.0
    assert 0.8 < score_names("hello", "helo", "fuzzy_ratio") < 1.0


def test_score_names_token_set_word_order() -> None:
    assert score_names("huile filtre", "filtre huile", "token_set") == 1.0
    assert score_names("huile filtre", "filtre huile", "levenshtein") < 1.0


def test_score_names_empty_both() -> None:
    for method in ("levenshtein", "fuzzy_ratio", "token_set"):
        assert score_names("", "", method) == 1.0


def test_score_names_empty_one() -> None:
    for method in ("levenshtein", "fuzzy_ratio", "token_set"):
        assert score_names("abc", "", method) == 0.0


def test_prepare_name_follows_config() -> None:
    config = MatchConfig(remove_diacritics=True, collapse_whitespace=True)
    assert prepare_name("  Filtre  À huile ", config) == "filtre a huile"
    assert prepare_name("Filtre À", MatchConfig(lowercase=False)) == "Filtre À"


def test_score_names_unknown_method() -> None:
    with pytest.raises(ConfigError, match="scorer invalide"):
        score_names("abc", "abc", "jaro")
