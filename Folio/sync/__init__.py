"""Read/write orchestration across remote and local stores."""

from .repository import PortfolioRepository, LoadResult, SaveResult, DocumentSource, build_repository

__all__ = ["PortfolioRepository", "LoadResult", "SaveResult", "DocumentSource", "build_repository"]
