"""Portfolio content model and merge-with-defaults."""

from .schema import PortfolioDocument, PartialPortfolioDocument, coerce_partial, default_document
from .merge import merge

__all__ = ["PortfolioDocument", "PartialPortfolioDocument", "coerce_partial", "default_document", "merge"]
