"""Schémas et types pour le rapprochement devis / catalogue."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from devismatch.config import DEFAULT_HIGH_CONFIDENCE, DEFAULT_THRESHOLD
from devismatch.normalize import is_missing, safe_str


def _number(val: Any) -> float:
    """Montant ou quantité ; une cellule vide vaut 0."""
    if is_missing(val) or (isinstance(val, str) and not val.strip()):
        return 0.0
    return float(val)


def _optional_str(val: Any) -> str | None:
    return None if is_missing(val) else str(val)


def to_percentage(confidence: float) -> int:
    """Pourcentage arrondi au plus proche (0.5 vers le haut)."""
    return math.floor(confidence * 100 + 0.5)


@dataclass(frozen=True)
class CatalogEntry:
    """Article de référence (ex. article d'une campagne d'achat)."""

    id: str
    name: str


@dataclass
class ExtractedLineItem:
    """Ligne d'article extraite d'un devis fournisseur (texte libre, non fiable)."""

    product_name: str
    quantity: float = 0.0
    unit_price: float = 0.0
    total_price: float = 0.0
    reference: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ExtractedLineItem:
        return cls(
            product_name=safe_str(d.get("product_name")),
            quantity=_number(d.get("quantity")),
            unit_price=_number(d.get("unit_price")),
            total_price=_number(d.get("total_price")),
            reference=_optional_str(d.get("reference")),
            description=_optional_str(d.get("description")),
        )


def confidence_level(
    confidence: float | None,
    *,
    high: float = DEFAULT_HIGH_CONFIDENCE,
    medium: float = DEFAULT_THRESHOLD,
) -> str | None:
    """
    Niveau d'affichage de la confiance : high, medium, low (None si absente).

    Comparé sur le pourcentage arrondi, celui qui est affiché au relecteur.
    """
    if confidence is None:
        return None
    percentage = to_percentage(confidence)
    if percentage >= to_percentage(high):
        return "high"
    if percentage >= to_percentage(medium):
        return "medium"
    return "low"


@dataclass
class MatchResult:
    """Résultat du rapprochement pour une ligne extraite."""

    item: ExtractedLineItem
    entry: CatalogEntry | None = None
    confidence: float | None = None
    status: str = "unmatched"  # auto, unmatched, manual, rejected

    @property
    def is_matched(self) -> bool:
        return self.entry is not None

    @property
    def matched_id(self) -> str | None:
        return self.entry.id if self.entry is not None else None

    @property
    def percentage(self) -> int | None:
        if self.confidence is None:
            return None
        return to_percentage(self.confidence)

    def __repr__(self) -> str:
        if self.entry is None:
            return f"MatchResult({self.item.product_name!r}, unmatched)"
        conf = f"{self.confidence:.2f}" if self.confidence is not None else "-"
        return f"MatchResult({self.item.product_name!r} -> {self.entry.id}, confidence={conf})"
