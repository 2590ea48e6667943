"""Read/write facade shared by the public site and the admin editor.

The remote store is the source of truth when it answers; the local cache
is a write-through replica that takes over when it does not. Nothing in
here raises on a remote or cache failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import requests

from ..config.settings import Settings
from ..content.merge import merge
from ..content.schema import PortfolioDocument, default_document
from ..remote.client import RemoteSyncClient
from ..remote.results import Fail, RemoteError, Result, Success
from ..storage.local_cache import (
    FileKeyValueStorage,
    KeyValueStorage,
    LocalCacheStore,
    MemoryKeyValueStorage,
)

logger = logging.getLogger("FOLIO.Repository")


class DocumentSource(str, Enum):
    """Where a loaded document came from."""
    REMOTE = "remote"
    LOCAL = "local"
    DEFAULT = "default"


@dataclass
class LoadResult:
    document: PortfolioDocument
    source: DocumentSource
    error: Optional[RemoteError] = None


@dataclass
class SaveResult:
    """Outcome of a save; the local cache is always written."""
    success: bool
    error: Optional[RemoteError] = None

    @property
    def saved_locally_only(self) -> bool:
        return not self.success

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> Dict[str, Any]:
        return {
            "saved": self.success,
            "saved_locally_only": self.saved_locally_only,
            "error": self.error.to_dict() if self.error else None,
        }


class PortfolioRepository:
    """Loads and saves the portfolio document across remote and local stores."""

    def __init__(self, remote: RemoteSyncClient, cache: LocalCacheStore):
        self.remote = remote
        self.cache = cache

    def load_with_source(self) -> LoadResult:
        """Load the document and report which layer supplied it."""
        fetched = self.remote.fetch_document()
        if isinstance(fetched, Success):
            document = merge(fetched.value)
            self.cache.write(document)
            return LoadResult(document, DocumentSource.REMOTE)

        logger.info(f"Remote load failed ({fetched.kind.value}); falling back to local cache")
        cached = self.cache.read()
        if cached is not None:
            return LoadResult(merge(cached), DocumentSource.LOCAL, fetched.error)

        logger.info("No usable local cache; serving default portfolio")
        return LoadResult(default_document(), DocumentSource.DEFAULT, fetched.error)

    def load(self) -> PortfolioDocument:
        return self.load_with_source().document

    def save(self, doc: PortfolioDocument) -> SaveResult:
        """Upsert remotely, then always write the local cache."""
        upserted = self.remote.upsert_document(doc)
        self.cache.write(doc)
        if isinstance(upserted, Fail):
            logger.warning(f"Saved to local cache only ({upserted.kind.value}): {upserted.error.message}")
            return SaveResult(success=False, error=upserted.error)
        return SaveResult(success=True)

    def upload_and_attach(
        self,
        data: bytes,
        filename: Optional[str],
        category: Any,
        content_type: Optional[str] = None,
    ) -> Result[str]:
        """Upload an image and return its URL.

        The caller places the URL in its document and calls ``save()``;
        nothing is saved here.
        """
        return self.remote.upload_object(data, filename, category, content_type)

    def reset(self) -> PortfolioDocument:
        """Replace the cached document with the defaults.

        The remote row is left alone until the next ``save()``.
        """
        document = default_document()
        self.cache.write(document)
        logger.info("Local portfolio reset to defaults")
        return document


def build_repository(settings: Settings, session: Optional[requests.Session] = None) -> PortfolioRepository:
    """Wire the remote client and local cache described by ``settings``."""
    if settings.cache.directory:
        storage: KeyValueStorage = FileKeyValueStorage(settings.cache.directory)
    else:
        logger.warning("CACHE_DIR is empty; the local cache will not survive restarts")
        storage = MemoryKeyValueStorage()
    return PortfolioRepository(
        RemoteSyncClient(settings.remote, session=session),
        LocalCacheStore(storage, key=settings.cache.key),
    )
