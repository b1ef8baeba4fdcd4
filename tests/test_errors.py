"""Tests des cas d'erreur."""

from pathlib import Path

import pandas as pd
import pytest

from devismatch.cli import main
from devismatch.config import ConfigFileError, MatchConfig
from devismatch.io_excel import TableFileError, load_sheet
from devismatch.quote import QuoteFileError, load_quote


def test_config_load_file_not_found(tmp_path: Path) -> None:
    """MatchConfig.load() lève ConfigFileError si le fichier n'existe pas."""
    with pytest.raises(ConfigFileError, match="introuvable"):
        MatchConfig.load(tmp_path / "inexistant.json")


def test_config_load_invalid_json(tmp_path: Path) -> None:
    bad_json = tmp_path / "config.json"
    bad_json.write_text("{ invalid json }", encoding="utf-8")
    with pytest.raises(ConfigFileError, match="JSON invalide"):
        MatchConfig.load(bad_json)


def test_config_load_not_dict(tmp_path: Path) -> None:
    bad_config = tmp_path / "config.json"
    bad_config.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ConfigFileError, match="objet JSON"):
        MatchConfig.load(bad_config)


def test_load_sheet_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(TableFileError, match="introuvable"):
        load_sheet(tmp_path / "inexistant.xlsx")


def test_load_sheet_missing_sheet(tmp_path: Path) -> None:
    xlsx = tmp_path / "catalogue.xlsx"
    pd.DataFrame({"id": ["1"]}).to_excel(xlsx, sheet_name="Articles", index=False, engine="openpyxl")
    with pytest.raises(TableFileError, match="Feuille 'Inexistante' introuvable"):
        load_sheet(xlsx, sheet_name="Inexistante")


def test_load_sheet_unsupported_extension(tmp_path: Path) -> None:
    txt = tmp_path / "catalogue.txt"
    txt.write_text("id\n1\n", encoding="utf-8")
    with pytest.raises(TableFileError, match="Format non supporté"):
        load_sheet(txt)


def test_load_quote_not_found(tmp_path: Path) -> None:
    with pytest.raises(QuoteFileError, match="introuvable"):
        load_quote(tmp_path / "devis.json")


def test_load_quote_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "devis.json"
    path.write_text("{ pas du json", encoding="utf-8")
    with pytest.raises(QuoteFileError, match="JSON invalide"):
        load_quote(path)


def test_load_quote_bad_item(tmp_path: Path) -> None:
    path = tmp_path / "devis.json"
    path.write_text('{"items": [{"product_name": "Anode", "quantity": "beaucoup"}]}', encoding="utf-8")
    with pytest.raises(QuoteFileError, match="Ligne 0 invalide"):
        load_quote(path)


def test_cli_config_error_exit_code(capsys: pytest.CaptureFixture) -> None:
    """La CLI retourne 1 et affiche un message en cas d'erreur."""
    exit_code = main(["match", "--config", "/chemin/inexistant.json", "--dry-run"])
    assert exit_code == 1
    assert "Erreur" in capsys.readouterr().err


def test_cli_missing_quote_file_exit_code(tmp_path: Path) -> None:
    exit_code = main(
        [
            "match",
            "--quote",
            str(tmp_path / "devis.json"),
            "--catalog",
            str(tmp_path / "catalogue.xlsx"),
            "--dry-run",
        ]
    )
    assert exit_code == 1
