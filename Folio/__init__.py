"""Folio - portfolio content persistence with remote sync and local fallback"""

from __future__ import annotations

__version__ = "0.1.0"

# Content model
from .content.schema import (
    PortfolioDocument,
    PartialPortfolioDocument,
    PersonalInfo,
    SocialLinks,
    Stats,
    Skill,
    Experience,
    Education,
    Project,
    GalleryItem,
    coerce_partial,
    default_document,
)
from .content.merge import merge

# Storage and sync
from .storage.local_cache import LocalCacheStore, FileKeyValueStorage, MemoryKeyValueStorage
from .remote.client import RemoteSyncClient, UploadCategory
from .remote.results import Success, Fail, RemoteError
from .sync.repository import PortfolioRepository, LoadResult, SaveResult, DocumentSource, build_repository

# Configuration & errors
from .config.settings import Settings, get_settings
from .utils.errors import ErrorKind, FolioException

__all__ = [
    "__version__",

    # Content model
    "PortfolioDocument",
    "PartialPortfolioDocument",
    "PersonalInfo",
    "SocialLinks",
    "Stats",
    "Skill",
    "Experience",
    "Education",
    "Project",
    "GalleryItem",
    "coerce_partial",
    "default_document",
    "merge",

    # Storage and sync
    "LocalCacheStore",
    "FileKeyValueStorage",
    "MemoryKeyValueStorage",
    "RemoteSyncClient",
    "UploadCategory",
    "Success",
    "Fail",
    "RemoteError",
    "PortfolioRepository",
    "LoadResult",
    "SaveResult",
    "DocumentSource",
    "build_repository",

    # Configuration & errors
    "Settings",
    "get_settings",
    "ErrorKind",
    "FolioException",
]
