"""I/O tableurs : chargement du catalogue et sauvegarde (Excel, ODS, CSV)."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

import pandas as pd

from devismatch.config import DevisMatchError, MatchConfig
from devismatch.matching.schema import CatalogEntry
from devismatch.normalize import safe_str

logger = logging.getLogger(__name__)

SUPPORTED_INPUT_EXTENSIONS = (".xlsx", ".xls", ".ods", ".csv")


class TableFileError(DevisMatchError):
    """Erreur de chargement d'un tableur (fichier absent, feuille ou colonne inexistante)."""


def _get_engine(path: Path) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix in (".ods", ".odt"):
        return "odf"
    return None


def _is_csv(path: Path) -> bool:
    return path.suffix.lower() == ".csv"


def _detect_csv_delimiter(path: Path, encoding: str) -> str | None:
    with path.open("r", encoding=encoding) as f:
        sample_lines: list[str] = []
        for line in f:
            if line.strip() == "":
                continue
            sample_lines.append(line)
            if len(sample_lines) >= 5:
                break
    if not sample_lines:
        return None
    sample = "".join(sample_lines)
    try:
        return csv.Sniffer().sniff(sample, delimiters=[",", ";", "\t", "|"]).delimiter
    except csv.Error:
        first = sample_lines[0]
        counts = {d: first.count(d) for d in [",", ";", "\t", "|"]}
        best = max(counts, key=counts.get)  # type: ignore[arg-type]
        return best if counts[best] > 0 else None


def _open_workbook(path: Path) -> pd.ExcelFile:
    try:
        engine = _get_engine(path)
        return pd.ExcelFile(path, engine=engine) if engine else pd.ExcelFile(path)
    except ImportError as e:
        ext = path.suffix.lower()
        if ext == ".xls":
            raise TableFileError(f"Format .xls requis: pip install xlrd. Détail: {e}") from e
        if ext in (".ods", ".odt"):
            raise TableFileError(f"Format ODS requis: pip install odfpy. Détail: {e}") from e
        raise TableFileError(f"Impossible de lire {path}: {e}") from e
    except Exception as e:
        raise TableFileError(f"Impossible de lire le fichier {path}: {e}") from e


def list_sheets(filepath: str | Path) -> list[str]:
    """
    Liste les noms des feuilles d'un fichier tableur.

    Formats supportés : .xlsx, .xls, .ods, .csv (une seule "feuille" pour CSV).

    Raises:
        TableFileError: Si le fichier est absent ou illisible.
    """
    path = Path(filepath)
    if not path.exists():
        raise TableFileError(f"Fichier introuvable: {path}")
    if _is_csv(path):
        return ["(données)"]
    return [str(s) for s in _open_workbook(path).sheet_names]


def load_sheet(
    filepath: str | Path,
    sheet_name: str | None = None,
) -> pd.DataFrame:
    """
    Charge une feuille dans un DataFrame en préservant le texte (dtype=str).

    Args:
        filepath: Chemin vers le fichier.
        sheet_name: Nom de la feuille (None = première). Ignoré pour CSV.

    Returns:
        DataFrame chargé.

    Raises:
        TableFileError: Si le fichier est absent, illisible ou si la feuille n'existe pas.
    """
    path = Path(filepath)
    if not path.exists():
        raise TableFileError(f"Fichier introuvable: {path}")
    if path.suffix.lower() not in SUPPORTED_INPUT_EXTENSIONS:
        raise TableFileError(f"Format non supporté: {path.suffix} (attendu: {', '.join(SUPPORTED_INPUT_EXTENSIONS)})")

    if _is_csv(path):
        for encoding in ("utf-8", "latin-1"):
            try:
                delimiter = _detect_csv_delimiter(path, encoding) or ","
                return pd.read_csv(path, dtype=str, encoding=encoding, sep=delimiter)
            except UnicodeDecodeError:
                logger.debug("Encodage %s refusé pour %s", encoding, path)
                continue
            except pd.errors.EmptyDataError as e:
                raise TableFileError(f"Fichier CSV vide: {path}") from e
            except Exception as e:
                raise TableFileError(f"Erreur CSV {path}: {e}") from e
        raise TableFileError(f"Encodage CSV non reconnu: {path}")

    xl = _open_workbook(path)
    if sheet_name is None:
        sheet_name = xl.sheet_names[0]  # type: ignore[assignment]
    elif sheet_name not in xl.sheet_names:
        sheets = [str(s) for s in xl.sheet_names]
        raise TableFileError(f"Feuille '{sheet_name}' introuvable dans {path}. Feuilles: {', '.join(sheets)}")

    try:
        return pd.read_excel(xl, sheet_name=sheet_name, dtype=str)  # type: ignore[return-value]
    except Exception as e:
        raise TableFileError(f"Erreur feuille '{sheet_name}' dans {path}: {e}") from e


def catalog_from_df(
    df: pd.DataFrame,
    id_col: str = "id",
    name_col: str = "product_name",
) -> list[CatalogEntry]:
    """
    Convertit un DataFrame en entrées catalogue, dans l'ordre des lignes.

    Les lignes sans identifiant sont ignorées. Un libellé vide reste une
    entrée valide (il ne sera rapproché que d'un libellé vide).

    Raises:
        TableFileError: Si une colonne requise est absente.
    """
    missing = [c for c in (id_col, name_col) if c not in df.columns]
    if missing:
        raise TableFileError(
            f"Colonnes absentes du catalogue: {', '.join(missing)}. Colonnes: {', '.join(map(str, df.columns))}"
        )

    entries: list[CatalogEntry] = []
    for _, row in df.iterrows():
        entry_id = safe_str(row[id_col]).strip()
        if not entry_id:
            continue
        entries.append(CatalogEntry(id=entry_id, name=safe_str(row[name_col])))
    return entries


def load_catalog(config: MatchConfig) -> list[CatalogEntry]:
    """Charge le catalogue de référence décrit par la configuration."""
    if not config.catalog_file:
        raise TableFileError("catalog_file non renseigné")
    df = load_sheet(config.catalog_file, config.catalog_sheet)
    entries = catalog_from_df(df, config.catalog_id_col, config.catalog_name_col)
    logger.info("Catalogue chargé: %d entrées depuis %s", len(entries), config.catalog_file)
    return entries


def save_spreadsheet(
    filepath: str | Path,
    dataframes: dict[str, pd.DataFrame],
    *,
    index: bool = False,
) -> None:
    """
    Sauvegarde plusieurs DataFrames dans un fichier xlsx ou ods (une feuille par DataFrame).

    Args:
        filepath: Chemin de sortie (.xlsx ou .ods).
        dataframes: Dict {nom_feuille: DataFrame}.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix == ".ods":
        engine = "odf"
    elif suffix == ".xlsx":
        engine = "openpyxl"
    else:
        raise TableFileError(f"Format de sortie non supporté: {suffix}")

    with pd.ExcelWriter(path, engine=engine) as writer:
        for sheet_name, df in dataframes.items():
            # Excel limite les noms de feuille à 31 caractères
            safe_name = str(sheet_name)[:31]
            df.to_excel(writer, sheet_name=safe_name, index=index)
