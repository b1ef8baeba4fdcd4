"""Configuration du rapprochement et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

VALID_SCORERS = frozenset({"levenshtein", "fuzzy_ratio", "token_set"})

DEFAULT_THRESHOLD = 0.6
DEFAULT_HIGH_CONFIDENCE = 0.8


class DevisMatchError(Exception):
    """Exception de base pour devismatch."""


class ConfigError(DevisMatchError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(DevisMatchError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


@dataclass
class MatchConfig:
    """Paramètres d'une passe de rapprochement devis / catalogue."""

    # Seuil strict : une entrée est retenue si similarité > threshold
    threshold: float = DEFAULT_THRESHOLD
    scorer: str = "levenshtein"  # levenshtein, fuzzy_ratio, token_set
    lowercase: bool = True
    remove_diacritics: bool = False
    collapse_whitespace: bool = False
    # None = max(DEFAULT_HIGH_CONFIDENCE, threshold)
    high_confidence: float | None = None

    quote_file: str = ""
    catalog_file: str = ""
    catalog_sheet: str | None = None  # None = première feuille
    catalog_id_col: str = "id"
    catalog_name_col: str = "product_name"

    def __post_init__(self) -> None:
        if self.high_confidence is None:
            self.high_confidence = max(DEFAULT_HIGH_CONFIDENCE, self.threshold)
        self.validate()

    def validate(self) -> None:
        """
        Vérifie la cohérence des paramètres.

        Raises:
            ConfigError: Si un paramètre est hors domaine.
        """
        if not 0 <= self.threshold <= 1:
            raise ConfigError(f"threshold doit être entre 0 et 1 (got {self.threshold})")
        if self.scorer not in VALID_SCORERS:
            raise ConfigError(f"scorer invalide: {self.scorer!r}. Valides: {sorted(VALID_SCORERS)}")
        if not self.threshold <= self.high_confidence <= 1:
            raise ConfigError(
                f"high_confidence doit être entre threshold ({self.threshold}) et 1 (got {self.high_confidence})"
            )
        if not self.catalog_id_col or not self.catalog_name_col:
            raise ConfigError("catalog_id_col et catalog_name_col ne peuvent pas être vides")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> MatchConfig:
        try:
            threshold = float(d.get("threshold", DEFAULT_THRESHOLD))
            raw_high = d.get("high_confidence")
            high_confidence = float(raw_high) if raw_high is not None else None
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Valeur numérique invalide: {e}") from e

        return cls(
            threshold=threshold,
            scorer=d.get("scorer", "levenshtein"),
            lowercase=bool(d.get("lowercase", True)),
            remove_diacritics=bool(d.get("remove_diacritics", False)),
            collapse_whitespace=bool(d.get("collapse_whitespace", False)),
            high_confidence=high_confidence,
            quote_file=d.get("quote_file", ""),
            catalog_file=d.get("catalog_file", ""),
            catalog_sheet=d.get("catalog_sheet"),
            catalog_id_col=d.get("catalog_id_col", "id"),
            catalog_name_col=d.get("catalog_name_col", "product_name"),
        )

    @classmethod
    def load(cls, path: str | Path) -> MatchConfig:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        config = cls.from_dict(d)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """
        Résout les chemins relatifs par rapport au répertoire de base (ex. dossier du fichier config).

        Modifie quote_file et catalog_file en place.
        """
        base = Path(base_dir)
        if self.quote_file and not Path(self.quote_file).is_absolute():
            self.quote_file = str((base / self.quote_file).resolve())
        if self.catalog_file and not Path(self.catalog_file).is_absolute():
            self.catalog_file = str((base / self.catalog_file).resolve())
