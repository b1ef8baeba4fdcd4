"""Tests du chargement des devis extraits et des lignes fournisseur."""

import json
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from devismatch.matching.schema import CatalogEntry, ExtractedLineItem, MatchResult
from devismatch.quote import ExtractedQuote, QuoteFileError, build_supplier_quotes, load_quote


@pytest.fixture
def extraction_response() -> dict:
    return {
        "success": True,
        "extracted_quote": {
            "supplier_name": "Accastillage du Port",
            "quote_reference": "DV-2024-118",
            "quote_date": "2024-03-12",
            "validity_date": "2024-04-12",
            "total_amount": 127.5,
            "items": [
                {
                    "product_name": "Filtre a huile Volvo Penta",
                    "quantity": 5,
                    "unit_price": 18.5,
                    "total_price": 92.5,
                    "reference": "VP-3517857",
                    "description": "Filtre moteur D2",
                },
                {"product_name": "Pompe à eau", "quantity": 1, "unit_price": 35, "total_price": 35},
            ],
        },
    }


def test_quote_from_dict_unwraps_response(extraction_response: dict) -> None:
    quote = ExtractedQuote.from_dict(extraction_response)
    assert quote.supplier_name == "Accastillage du Port"
    assert quote.total_amount == 127.5
    assert len(quote.items) == 2
    assert quote.items[0].reference == "VP-3517857"
    assert quote.items[1].unit_price == 35.0
    assert quote.items[1].description is None


def test_quote_from_dict_bare_object() -> None:
    quote = ExtractedQuote.from_dict({"items": [{"product_name": "Anode"}]})
    assert quote.items == [ExtractedLineItem("Anode")]
    assert quote.quote_date is None
    assert quote.total_amount is None


def test_load_quote_json(tmp_path: Path, extraction_response: dict) -> None:
    path = tmp_path / "devis.json"
    path.write_text(json.dumps(extraction_response), encoding="utf-8")
    quote = load_quote(path)
    assert quote.quote_reference == "DV-2024-118"
    assert [i.product_name for i in quote.items] == ["Filtre a huile Volvo Penta", "Pompe à eau"]


def test_load_quote_table(tmp_path: Path) -> None:
    path = tmp_path / "devis.xlsx"
    pd.DataFrame(
        {
            "product_name": ["Anode zinc", "Joint torique 12 mm"],
            "quantity": ["2", "10"],
            "unit_price": ["12.9", None],
        }
    ).to_excel(path, index=False, engine="openpyxl")
    quote = load_quote(path)
    assert len(quote.items) == 2
    assert quote.items[0].quantity == 2.0
    assert quote.items[0].unit_price == 12.9
    assert quote.items[1].unit_price == 0.0


def test_build_supplier_quotes(extraction_response: dict) -> None:
    quote = ExtractedQuote.from_dict(extraction_response)
    results = [
        MatchResult(quote.items[0], CatalogEntry("c1", "Filtre à huile Volvo Penta"), 0.96, "auto"),
        MatchResult(quote.items[1]),
    ]
    rows = build_supplier_quotes(quote, results, "sup-7")
    assert len(rows) == 1
    row = rows[0]
    assert row["campaign_item_id"] == "c1"
    assert row["supplier_id"] == "sup-7"
    assert row["unit_price"] == 18.5
    assert row["minimum_quantity"] == 5.0
    assert row["quality_rating"] == 5
    assert row["quote_date"] == "2024-03-12"
    assert row["valid_until"] == "2024-04-12"
    assert row["quote_reference"] == "DV-2024-118"
    assert row["notes"] == "Importé automatiquement - Filtre moteur D2"


def test_build_supplier_quotes_defaults() -> None:
    item = ExtractedLineItem("Anode zinc", quantity=2, unit_price=12.9)
    quote = ExtractedQuote(items=[item])
    results = [MatchResult(item, CatalogEntry("c9", "Anode zinc"), 1.0, "manual")]
    rows = build_supplier_quotes(quote, results, "sup-1", today=date(2024, 5, 1))
    assert rows[0]["quote_date"] == "2024-05-01"
    assert rows[0]["valid_until"] is None
    assert rows[0]["notes"] == "Importé automatiquement - "


def test_build_supplier_quotes_nothing_matched() -> None:
    item = ExtractedLineItem("Pompe à eau")
    assert build_supplier_quotes(ExtractedQuote(items=[item]), [MatchResult(item)], "sup-1") == []


def test_load_quote_table_blank_cells(tmp_path: Path) -> None:
    path = tmp_path / "devis.xlsx"
    pd.DataFrame(
        {
            "product_name": ["Anode", None],
            "unit_price": [None, "3"],
            "reference": [None, "R-2"],
        }
    ).to_excel(path, index=False, engine="openpyxl")
    quote = load_quote(path)
    assert quote.items[0].product_name == "Anode"
    assert quote.items[0].unit_price == 0.0
    assert quote.items[0].reference is None
    assert quote.items[1].product_name == ""
    assert quote.items[1].unit_price == 3.0
    assert quote.items[1].reference == "R-2"


def test_line_item_from_dict_nan_values() -> None:
    item = ExtractedLineItem.from_dict(
        {"product_name": float("nan"), "quantity": float("nan"), "unit_price": "", "description": pd.NA}
    )
    assert item == ExtractedLineItem("")


def test_quote_from_dict_failed_extraction() -> None:
    with pytest.raises(QuoteFileError, match="PDF illisible"):
        ExtractedQuote.from_dict({"success": False, "error": "PDF illisible"})
    with pytest.raises(QuoteFileError, match="Erreur lors du traitement"):
        ExtractedQuote.from_dict({"success": False})


def test_load_quote_failed_extraction(tmp_path: Path) -> None:
    path = tmp_path / "devis.json"
    path.write_text('{"success": false, "error": "PDF illisible"}', encoding="utf-8")
    with pytest.raises(QuoteFileError, match="PDF illisible"):
        load_quote(path)
