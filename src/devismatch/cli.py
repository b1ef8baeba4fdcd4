"""Interface en ligne de commande devismatch."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

import pandas as pd

from devismatch import __version__
from devismatch.config import DevisMatchError, MatchConfig
from devismatch.io_excel import list_sheets, load_catalog, save_spreadsheet
from devismatch.logging_config import setup_logging
from devismatch.matching.matcher import Matcher
from devismatch.quote import build_supplier_quotes, load_quote
from devismatch.report import build_items_df, build_report_df, print_report_console

logger = logging.getLogger(__name__)


def cmd_list_sheets(filepath: str) -> int:
    """Liste les feuilles d'un fichier tableur."""
    sheets = list_sheets(filepath)
    print(f"Feuilles dans {filepath}:")
    for s in sheets:
        print(f"  - {s}")
    return 0


def _print_unmatched(results: list) -> None:
    unmatched = [r for r in results if not r.is_matched]
    if not unmatched:
        return
    print(f"{len(unmatched)} ligne(s) à vérifier manuellement:")
    for r in unmatched:
        print(f"  - {r.item.product_name}")


def cmd_match(
    config: MatchConfig,
    output_path: str | None,
    *,
    supplier_id: str | None = None,
    dry_run: bool = False,
) -> int:
    """Rapproche les lignes d'un devis avec le catalogue et écrit le résultat."""
    quote = load_quote(config.quote_file)
    catalog = load_catalog(config)

    matcher = Matcher(config)
    results = matcher.run(quote.items, catalog)

    print_report_console(results, config)
    _print_unmatched(results)

    if dry_run:
        print("Mode dry-run: pas d'écriture du fichier de sortie.")
        return 0

    if not output_path:
        print("Erreur: --output requis en mode non dry-run.", file=sys.stderr)
        return 1

    sheets = {"Items": build_items_df(results, config)}
    if supplier_id:
        quotes = build_supplier_quotes(quote, results, supplier_id)
        sheets["Quotes"] = pd.DataFrame(quotes)
        logger.info("%d devis fournisseur préparés pour %s", len(quotes), supplier_id)
    sheets["REPORT"] = build_report_df(results, config)

    save_spreadsheet(output_path, sheets)
    print(f"Fichier de sortie: {output_path}")
    return 0


def _build_config(args: argparse.Namespace) -> MatchConfig:
    """Fusionne le fichier de configuration éventuel et les options de la ligne de commande."""
    config = MatchConfig.load(args.config) if args.config else MatchConfig()
    overrides: dict[str, object] = {}
    if args.quote:
        overrides["quote_file"] = args.quote
    if args.catalog:
        overrides["catalog_file"] = args.catalog
    if args.sheet:
        overrides["catalog_sheet"] = args.sheet
    if args.id_col:
        overrides["catalog_id_col"] = args.id_col
    if args.name_col:
        overrides["catalog_name_col"] = args.name_col
    if args.threshold is not None:
        overrides["threshold"] = args.threshold
    if args.high_confidence is not None:
        overrides["high_confidence"] = args.high_confidence
    elif args.threshold is not None:
        # le niveau "high" suit un seuil relevé au-dessus de lui
        overrides["high_confidence"] = max(config.high_confidence, args.threshold)
    if args.scorer:
        overrides["scorer"] = args.scorer
    # replace() repasse par __post_init__ : les valeurs surchargées sont validées
    return replace(config, **overrides) if overrides else config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="devismatch",
        description="Rapprochement des lignes de devis fournisseur avec un catalogue (fuzzy matching)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="Plus de logs (-v: INFO, -vv: DEBUG)")
    parser.add_argument("--log-file", help="Fichier de log (rotation)")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    p_list = subparsers.add_parser("list-sheets", help="Lister les feuilles d'un tableur")
    p_list.add_argument("file", help="Fichier xlsx/ods/csv")

    p_match = subparsers.add_parser("match", help="Rapprocher un devis du catalogue")
    p_match.add_argument("--config", "-c", help="Fichier config JSON")
    p_match.add_argument("--quote", "-q", help="Devis extrait (.json ou tableur)")
    p_match.add_argument("--catalog", help="Catalogue de référence (tableur)")
    p_match.add_argument("--sheet", help="Feuille du catalogue")
    p_match.add_argument("--id-col", help="Colonne identifiant du catalogue")
    p_match.add_argument("--name-col", help="Colonne libellé du catalogue")
    p_match.add_argument("--threshold", type=float, help="Seuil de similarité (strict, 0-1)")
    p_match.add_argument("--high-confidence", type=float, help="Seuil du niveau de confiance haute (0-1)")
    p_match.add_argument("--scorer", choices=["levenshtein", "fuzzy_ratio", "token_set"], help="Méthode de score")
    p_match.add_argument("--supplier-id", help="Fournisseur : génère l'onglet Quotes")
    p_match.add_argument("--output", "-o", help="Fichier xlsx/ods de sortie")
    p_match.add_argument("--dry-run", action="store_true", help="Ne pas écrire le fichier de sortie")

    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    setup_logging(level, args.log_file)

    try:
        if args.command == "list-sheets":
            return cmd_list_sheets(args.file)

        if args.command == "match":
            if not args.dry_run and not args.output:
                parser.error("--output requis sauf en --dry-run")
            config = _build_config(args)
            if not config.quote_file or not config.catalog_file:
                parser.error("--quote et --catalog requis (ou quote_file / catalog_file dans --config)")
            return cmd_match(
                config,
                args.output,
                supplier_id=args.supplier_id,
                dry_run=args.dry_run,
            )
    except DevisMatchError as e:
        logger.debug("Échec de la commande %s", args.command, exc_info=True)
        print(f"Erreur: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
