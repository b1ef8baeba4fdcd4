"""Crée un catalogue de campagne et un devis extrait de démonstration pour devismatch."""

import json
from pathlib import Path

import pandas as pd

DATA_DIR = Path(__file__).parent / "data"
DATA_DIR.mkdir(exist_ok=True)

catalog = pd.DataFrame({
    "id": ["c1", "c2", "c3", "c4", "c5"],
    "product_name": [
        "Filtre à huile Volvo Penta",
        "Courroie accessoire",
        "Joint torique 12mm",
        "Joint torique 14mm",
        "Anode zinc arbre 25mm",
    ],
})

quote = {
    "success": True,
    "extracted_quote": {
        "supplier_name": "Accastillage du Port",
        "quote_reference": "DV-2024-118",
        "quote_date": "2024-03-12",
        "validity_date": "2024-04-12",
        "total_amount": 173.5,
        "items": [
            {"product_name": "FILTRE A HUILE VOLVO PENTA", "quantity": 5, "unit_price": 18.5, "total_price": 92.5},
            {"product_name": "Joint torique 12 mm", "quantity": 20, "unit_price": 0.8, "total_price": 16.0},
            {"product_name": "Anode zinc arbre 25", "quantity": 3, "unit_price": 10.0, "total_price": 30.0},
            {"product_name": "Pompe à eau", "quantity": 1, "unit_price": 35.0, "total_price": 35.0,
             "description": "Pompe eau de mer"},
        ],
    },
}

catalog.to_excel(DATA_DIR / "campagne.xlsx", index=False, engine="openpyxl")
(DATA_DIR / "devis.json").write_text(json.dumps(quote, ensure_ascii=False, indent=2), encoding="utf-8")
(DATA_DIR / "config.json").write_text(
    json.dumps({"quote_file": "devis.json", "catalog_file": "campagne.xlsx", "threshold": 0.6}, indent=2),
    encoding="utf-8",
)
print(f"Fichiers créés dans {DATA_DIR}")
