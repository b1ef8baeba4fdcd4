"""devismatch - Rapprochement des lignes de devis fournisseur avec un catalogue."""

__version__ = "0.1.0"

from devismatch.config import ConfigError, ConfigFileError, DevisMatchError  # noqa: E402
from devismatch.io_excel import TableFileError  # noqa: E402
from devismatch.quote import QuoteFileError  # noqa: E402

__all__ = [
    "__version__",
    "DevisMatchError",
    "ConfigError",
    "ConfigFileError",
    "TableFileError",
    "QuoteFileError",
]
