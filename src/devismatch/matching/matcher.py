"""Moteur de rapprochement : meilleure entrée catalogue par ligne de devis."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from devismatch.config import DevisMatchError, MatchConfig
from devismatch.matching.schema import CatalogEntry, ExtractedLineItem, MatchResult
from devismatch.matching.scorers import prepare_name, score_names

logger = logging.getLogger(__name__)


def _select_best(
    name: str,
    candidates: Iterable[tuple[CatalogEntry, str]],
    config: MatchConfig,
) -> tuple[CatalogEntry | None, float | None]:
    """
    Parcourt les candidats (entrée, libellé normalisé) et garde le meilleur
    score strictement supérieur au seuil. À score égal, le premier rencontré
    est conservé.
    """
    best_entry: CatalogEntry | None = None
    best_score: float | None = None
    for entry, candidate_name in candidates:
        score = score_names(name, candidate_name, config.scorer)
        if score <= config.threshold:
            continue
        if best_score is None or score > best_score:
            best_entry = entry
            best_score = score
    return best_entry, best_score


def best_match(
    item: ExtractedLineItem,
    catalog: Sequence[CatalogEntry],
    config: MatchConfig | None = None,
) -> MatchResult:
    """
    Retourne le meilleur rapprochement d'une ligne extraite avec le catalogue.

    Ne lève jamais d'exception : l'absence de correspondance est un résultat
    normal (entry=None, confidence=None), à orienter vers une revue manuelle.

    Args:
        item: Ligne extraite du devis.
        catalog: Entrées de référence, dans l'ordre de priorité en cas d'égalité.
        config: Paramètres (seuil, normalisation, scorer). Défaut : MatchConfig().

    Returns:
        MatchResult.
    """
    config = config or MatchConfig()
    name = prepare_name(item.product_name, config)
    entry, score = _select_best(
        name,
        ((e, prepare_name(e.name, config)) for e in catalog),
        config,
    )
    if entry is None:
        return MatchResult(item=item)
    return MatchResult(item=item, entry=entry, confidence=score, status="auto")


class Matcher:
    """Rapprochement des lignes d'un devis avec les entrées d'un catalogue."""

    def __init__(self, config: MatchConfig | None = None) -> None:
        self.config = config or MatchConfig()

    def run(
        self,
        items: Sequence[ExtractedLineItem],
        catalog: Sequence[CatalogEntry],
    ) -> list[MatchResult]:
        """
        Exécute le rapprochement pour toutes les lignes extraites.

        Returns:
            Liste de MatchResult, un par ligne, dans l'ordre des lignes.
        """
        prepared = [(e, prepare_name(e.name, self.config)) for e in catalog]

        results: list[MatchResult] = []
        for item in items:
            name = prepare_name(item.product_name, self.config)
            entry, score = _select_best(name, prepared, self.config)
            if entry is None:
                logger.debug("Aucune correspondance pour %r", item.product_name)
                results.append(MatchResult(item=item))
            else:
                logger.debug("%r -> %s (%r, %.3f)", item.product_name, entry.id, entry.name, score)
                results.append(MatchResult(item=item, entry=entry, confidence=score, status="auto"))

        n_matched = sum(1 for r in results if r.is_matched)
        logger.info(
            "Rapprochement terminé: %d/%d lignes associées (seuil=%.2f, scorer=%s, catalogue=%d)",
            n_matched,
            len(results),
            self.config.threshold,
            self.config.scorer,
            len(prepared),
        )
        return results

    def resolve_manual(
        self,
        results: list[MatchResult],
        choices: dict[int, str | None],
        catalog: Sequence[CatalogEntry],
    ) -> None:
        """
        Applique les choix du relecteur aux résultats.

        choices: {index de la ligne: id catalogue ou None}
        None = pas de correspondance (rejected).

        Raises:
            DevisMatchError: Si un id choisi n'existe pas dans le catalogue,
                ou si un index de ligne est hors limites.
        """
        by_id = {e.id: e for e in catalog}
        for idx, entry_id in choices.items():
            if not 0 <= idx < len(results):
                raise DevisMatchError(f"Ligne inexistante: {idx}")
            r = results[idx]
            if entry_id is None:
                r.entry = None
                r.confidence = None
                r.status = "rejected"
                continue
            if entry_id not in by_id:
                raise DevisMatchError(f"Article catalogue inconnu: {entry_id!r}")
            entry = by_id[entry_id]
            r.entry = entry
            r.confidence = score_names(
                prepare_name(r.item.product_name, self.config),
                prepare_name(entry.name, self.config),
                self.config.scorer,
            )
            r.status = "manual"
