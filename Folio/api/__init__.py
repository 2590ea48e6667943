"""Folio REST API module."""

from .server import FolioAPIServer, APIResponse, create_app

__all__ = ["FolioAPIServer", "APIResponse", "create_app"]
