"""Génération du rapport et onglet REPORT."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from devismatch import __version__
from devismatch.config import MatchConfig
from devismatch.matching.schema import MatchResult, confidence_level


def _counts(results: list[MatchResult], config: MatchConfig) -> dict[str, int]:
    levels = [confidence_level(r.confidence, high=config.high_confidence, medium=config.threshold) for r in results]
    return {
        "nb_items": len(results),
        "nb_matched": sum(1 for r in results if r.is_matched),
        "nb_unmatched": sum(1 for r in results if not r.is_matched),
        "nb_auto": sum(1 for r in results if r.status == "auto"),
        "nb_manual": sum(1 for r in results if r.status == "manual"),
        "nb_rejected": sum(1 for r in results if r.status == "rejected"),
        "nb_high": levels.count("high"),
        "nb_medium": levels.count("medium"),
        "nb_low": levels.count("low"),
    }


def build_items_df(results: list[MatchResult], config: MatchConfig) -> pd.DataFrame:
    """Une ligne par article extrait, avec l'article catalogue associé et la confiance."""
    rows = []
    for r in results:
        rows.append(
            {
                "product_name": r.item.product_name,
                "reference": r.item.reference,
                "quantity": r.item.quantity,
                "unit_price": r.item.unit_price,
                "total_price": r.item.total_price,
                "matched_id": r.matched_id,
                "matched_name": r.entry.name if r.entry is not None else None,
                "confidence": r.confidence,
                "percentage": r.percentage,
                "level": confidence_level(r.confidence, high=config.high_confidence, medium=config.threshold),
                "status": r.status,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "product_name",
            "reference",
            "quantity",
            "unit_price",
            "total_price",
            "matched_id",
            "matched_name",
            "confidence",
            "percentage",
            "level",
            "status",
        ],
    )


def build_report_df(
    results: list[MatchResult],
    config: MatchConfig,
) -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : nb lignes, nb associées / non associées, répartition par niveau
    de confiance, paramètres, horodatage, version.
    """
    rows: list[tuple[str, object]] = [("Metric", "Value")]
    rows.extend(_counts(results, config).items())
    rows.extend(
        [
            ("", ""),
            ("Parameters", ""),
            ("threshold", config.threshold),
            ("high_confidence", config.high_confidence),
            ("scorer", config.scorer),
            ("lowercase", config.lowercase),
            ("remove_diacritics", config.remove_diacritics),
            ("collapse_whitespace", config.collapse_whitespace),
            ("", ""),
            ("timestamp", datetime.now().isoformat()),
            ("version", __version__),
        ]
    )
    return pd.DataFrame(rows, columns=["Key", "Value"])


def print_report_console(results: list[MatchResult], config: MatchConfig) -> None:
    """Affiche un résumé du rapport en console."""
    c = _counts(results, config)

    print("\n=== devismatch Report ===")
    print(f"  Lignes du devis:  {c['nb_items']}")
    print(f"  Associées:        {c['nb_matched']}")
    print(f"  Sans correspond.: {c['nb_unmatched']}")
    print(f"  Confiance haute:  {c['nb_high']}")
    print(f"  Confiance moy.:   {c['nb_medium']}")
    print(f"  Confiance faible: {c['nb_low']}")
    print(f"  Manuelles:        {c['nb_manual']}")
    print(f"  Rejetées:         {c['nb_rejected']}")
    print(f"  Seuil:            {config.threshold}")
    print(f"  Version:          {__version__}")
    print(f"  Timestamp:        {datetime.now().isoformat()}")
    print("=========================\n")
