"""Devis extraits : chargement et préparation des lignes de devis fournisseur."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from devismatch.config import DevisMatchError
from devismatch.io_excel import load_sheet
from devismatch.matching.schema import ExtractedLineItem, MatchResult

logger = logging.getLogger(__name__)

DEFAULT_QUALITY_RATING = 5
IMPORT_NOTE_PREFIX = "Importé automatiquement"
EXTRACTION_ERROR_MESSAGE = "Erreur lors du traitement"


class QuoteFileError(DevisMatchError):
    """Erreur de chargement d'un devis extrait (fichier absent, JSON invalide, lignes malformées)."""


@dataclass
class ExtractedQuote:
    """En-tête et lignes d'un devis extrait d'un PDF fournisseur."""

    items: list[ExtractedLineItem] = field(default_factory=list)
    supplier_name: str | None = None
    quote_reference: str | None = None
    quote_date: str | None = None
    validity_date: str | None = None
    total_amount: float | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ExtractedQuote:
        # Réponse de l'extraction : {"success": ..., "extracted_quote": {...}, "error": ...}
        if d.get("success") is False:
            raise QuoteFileError(d.get("error") or EXTRACTION_ERROR_MESSAGE)
        if isinstance(d.get("extracted_quote"), dict):
            d = d["extracted_quote"]

        raw_items = d.get("items", [])
        if not isinstance(raw_items, list):
            raise QuoteFileError("items doit être une liste")

        items: list[ExtractedLineItem] = []
        for i, raw in enumerate(raw_items):
            if not isinstance(raw, dict):
                raise QuoteFileError(f"Ligne {i} invalide: objet attendu")
            try:
                items.append(ExtractedLineItem.from_dict(raw))
            except (TypeError, ValueError) as e:
                raise QuoteFileError(f"Ligne {i} invalide: {e}") from e

        total = d.get("total_amount")
        try:
            total_amount = float(total) if total is not None else None
        except (TypeError, ValueError) as e:
            raise QuoteFileError(f"total_amount invalide: {total!r}") from e

        return cls(
            items=items,
            supplier_name=d.get("supplier_name"),
            quote_reference=d.get("quote_reference"),
            quote_date=d.get("quote_date"),
            validity_date=d.get("validity_date"),
            total_amount=total_amount,
        )


def load_quote(path: str | Path) -> ExtractedQuote:
    """
    Charge un devis extrait.

    Un fichier .json contient la sortie de l'extraction PDF ; tout autre format
    tableur (.xlsx, .csv, ...) est lu comme une liste de lignes avec au moins
    une colonne product_name.

    Raises:
        QuoteFileError: Si le fichier est absent ou malformé.
    """
    path = Path(path)
    if not path.exists():
        raise QuoteFileError(f"Devis introuvable: {path}")

    if path.suffix.lower() != ".json":
        df = load_sheet(path)
        if "product_name" not in df.columns:
            raise QuoteFileError(f"Colonne product_name absente de {path}")
        quote = ExtractedQuote.from_dict({"items": df.to_dict(orient="records")})
    else:
        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise QuoteFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise QuoteFileError(f"Impossible de lire {path}: {e}") from e
        if not isinstance(d, dict):
            raise QuoteFileError(f"Devis invalide: {path} doit contenir un objet JSON")
        quote = ExtractedQuote.from_dict(d)

    logger.info("Devis chargé: %d lignes depuis %s", len(quote.items), path)
    return quote


def build_supplier_quotes(
    quote: ExtractedQuote,
    results: list[MatchResult],
    supplier_id: str,
    *,
    today: date | None = None,
) -> list[dict[str, Any]]:
    """
    Construit les lignes de devis fournisseur à enregistrer, une par ligne associée.

    Les lignes sans correspondance sont ignorées.

    Args:
        quote: Devis extrait (en-tête).
        results: Résultats de rapprochement des lignes du devis.
        supplier_id: Fournisseur retenu par l'utilisateur.
        today: Date par défaut si le devis n'est pas daté.

    Returns:
        Liste de dicts prêts pour l'insertion.
    """
    quote_date = quote.quote_date or (today or date.today()).isoformat()
    rows: list[dict[str, Any]] = []
    for r in results:
        if r.entry is None:
            continue
        rows.append(
            {
                "campaign_item_id": r.entry.id,
                "supplier_id": supplier_id,
                "unit_price": r.item.unit_price,
                "minimum_quantity": r.item.quantity,
                "quality_rating": DEFAULT_QUALITY_RATING,
                "quote_date": quote_date,
                "valid_until": quote.validity_date,
                "quote_reference": quote.quote_reference,
                "notes": f"{IMPORT_NOTE_PREFIX} - {r.item.description or ''}",
            }
        )
    return rows
