"""Module de rapprochement devis / catalogue."""

from devismatch.matching.distance import edit_distance, similarity
from devismatch.matching.matcher import Matcher, best_match
from devismatch.matching.schema import CatalogEntry, ExtractedLineItem, MatchResult

__all__ = [
    "CatalogEntry",
    "ExtractedLineItem",
    "MatchResult",
    "Matcher",
    "best_match",
    "edit_distance",
    "similarity",
]
