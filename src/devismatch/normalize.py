"""Normalisation des libellés produits avant comparaison."""

from __future__ import annotations

import re
import unicodedata
from typing import Any

import pandas as pd


def _remove_diacritics(s: str) -> str:
    """Retire les diacritiques (accents) d'une chaîne."""
    nfd = unicodedata.normalize("NFD", s)
    return "".join(c for c in nfd if unicodedata.category(c) != "Mn")


def is_missing(s: Any) -> bool:
    """Vrai pour None, NaN, pd.NA et inf (cellule vide d'un tableur)."""
    if s is None:
        return True
    if isinstance(s, (str, bytes)):
        return False
    if isinstance(s, float) and s == float("inf"):
        return True
    try:
        return bool(pd.isna(s))
    except (TypeError, ValueError):
        return False


def norm_name(
    s: str | float | int | None,
    *,
    lower: bool = True,
    remove_diacritics: bool = False,
    collapse_whitespace: bool = False,
) -> str:
    """
    Normalise un libellé produit.

    Par défaut seule la casse est ramenée en minuscules : les espaces et les
    accents sont conservés tels quels, ce qui correspond au comportement
    historique du rapprochement des devis.

    Args:
        s: Valeur à normaliser (convertie en str si numérique).
        lower: Mettre en minuscules.
        remove_diacritics: Supprimer les accents.
        collapse_whitespace: Espaces multiples → espace simple, strip.

    Returns:
        Chaîne normalisée.
    """
    if is_missing(s):
        return ""
    text = str(s)
    if collapse_whitespace:
        text = unicodedata.normalize("NFKC", text)
        text = re.sub(r"\s+", " ", text).strip()
    if lower:
        text = text.lower()
    if remove_diacritics:
        text = _remove_diacritics(text)
    return text


def safe_str(val: Any) -> str:
    """Convertit une valeur en chaîne pour affichage/stockage."""
    if is_missing(val):
        return ""
    return str(val)
