"""Calcul du score de similarité entre deux libellés."""

from __future__ import annotations

from rapidfuzz import fuzz

from devismatch.config import VALID_SCORERS, ConfigError, MatchConfig
from devismatch.matching.distance import similarity
from devismatch.normalize import norm_name


def prepare_name(name: str, config: MatchConfig) -> str:
    """Applique la normalisation configurée à un libellé."""
    return norm_name(
        name,
        lower=config.lowercase,
        remove_diacritics=config.remove_diacritics,
        collapse_whitespace=config.collapse_whitespace,
    )


def score_names(a: str, b: str, method: str = "levenshtein") -> float:
    """
    Calcule le score (0-1) entre deux libellés déjà normalisés.

    Args:
        a: Libellé extrait.
        b: Libellé catalogue.
        method: levenshtein, fuzzy_ratio ou token_set.

    Returns:
        Score entre 0 et 1.

    Raises:
        ConfigError: Si la méthode est inconnue.
    """
    if method == "levenshtein":
        return similarity(a, b)

    # rapidfuzz renvoie 0 pour deux chaînes vides
    if not a and not b:
        return 1.0

    if method == "fuzzy_ratio":
        return float(fuzz.ratio(a, b)) / 100.0

    if method == "token_set":
        return float(fuzz.token_set_ratio(a, b)) / 100.0

    raise ConfigError(f"scorer invalide: {method!r}. Valides: {sorted(VALID_SCORERS)}")
