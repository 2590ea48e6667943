"""Client for the remote document store and image bucket.

Talks to a Supabase project over plain HTTP: the PostgREST endpoint holds
one row per document (``{id, data, updated_at}``) and the storage endpoint
holds uploaded images. Every public method returns ``Success`` or ``Fail``;
no transport exception reaches the caller.
"""

from __future__ import annotations

import logging
import mimetypes
import time
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from ..config.settings import RemoteConfig
from ..content.schema import PartialPortfolioDocument, PortfolioDocument, coerce_partial
from ..utils.errors import (
    FolioException,
    InvalidUploadError,
    NotConfiguredError,
    RemoteRejectedError,
    RemoteUnavailableError,
)
from .results import Fail, RemoteError, Result, Success

logger = logging.getLogger("FOLIO.Remote")

DEFAULT_EXTENSION = "png"
CACHE_CONTROL_SECONDS = "3600"
# Non-5xx statuses that mean "try again later" rather than "refused".
UNAVAILABLE_STATUS = {408, 429}


class UploadCategory(str, Enum):
    """Folders inside the image bucket."""
    AVATAR = "avatar"
    PROJECT = "project"
    GALLERY = "gallery"


def file_extension(filename: Optional[str]) -> str:
    """Lower-cased extension of ``filename`` without the dot."""
    name = (filename or "").rsplit("/", 1)[-1]
    if "." not in name:
        return DEFAULT_EXTENSION
    ext = "".join(c for c in name.rsplit(".", 1)[-1].lower() if c.isalnum())
    return ext or DEFAULT_EXTENSION


def generate_object_key(category: UploadCategory, filename: Optional[str]) -> str:
    """Unique object key: ``<category>/<epoch-millis>-<random>.<ext>``."""
    millis = int(time.time() * 1000)
    suffix = uuid.uuid4().hex[:12]
    return f"{category.value}/{millis}-{suffix}.{file_extension(filename)}"


class RemoteSyncClient:
    """Fetches, upserts and uploads against the remote stores."""

    def __init__(self, config: RemoteConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        if not self.is_configured:
            logger.warning("Remote store not configured; set SUPABASE_URL and SUPABASE_ANON_KEY")

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    @property
    def base_url(self) -> str:
        return (self.config.url or "").rstrip("/")

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.config.api_key or "",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _require_configured(self, operation: str) -> None:
        if not self.is_configured:
            raise NotConfiguredError(
                "Remote store not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY",
                context={"operation": operation},
            )

    def _request(self, method: str, url: str, operation: str, **kwargs) -> requests.Response:
        """Send a request, raising a Folio exception for any failure."""
        try:
            response = self.session.request(method, url, timeout=self.config.timeout, **kwargs)
        except requests.Timeout as e:
            raise RemoteUnavailableError(f"{operation} timed out", context={"operation": operation}) from e
        except requests.RequestException as e:
            raise RemoteUnavailableError(f"{operation} failed: {e}", context={"operation": operation}) from e

        if response.ok:
            return response

        context = {"operation": operation, "status_code": response.status_code}
        message = f"{operation} failed with HTTP {response.status_code}: {self._error_message(response)}"
        if response.status_code >= 500 or response.status_code in UNAVAILABLE_STATUS:
            raise RemoteUnavailableError(message, context=context)
        raise RemoteRejectedError(message, context=context)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return (response.text or "").strip()[:200] or response.reason or "no details"
        if isinstance(body, dict):
            return str(body.get("message") or body.get("error") or body.get("msg") or body)
        return str(body)

    @staticmethod
    def _fail(error: FolioException) -> Fail:
        logger.warning(f"Remote operation failed: {error}")
        return Fail(RemoteError.from_exception(error))

    def fetch_document(self) -> Result[PartialPortfolioDocument]:
        """Read the portfolio row from the document store."""
        try:
            self._require_configured("fetch_document")
            response = self._request(
                "GET",
                f"{self.base_url}/rest/v1/{self.config.table}",
                "fetch_document",
                params={"id": f"eq.{self.config.document_key}", "select": "data"},
                headers=self._headers({"Accept": "application/json"}),
            )
            try:
                rows = response.json()
            except ValueError as e:
                raise RemoteRejectedError("fetch_document returned invalid JSON") from e

            if not isinstance(rows, list) or not rows:
                raise RemoteRejectedError(
                    f"No portfolio row with id {self.config.document_key}",
                    context={"operation": "fetch_document", "status_code": response.status_code},
                )
            data = rows[0].get("data") if isinstance(rows[0], dict) else None
            if data is None:
                return Success(PartialPortfolioDocument())
            partial = coerce_partial(data)
            if partial is None:
                raise RemoteRejectedError("Stored portfolio data is not an object")
            return Success(partial)
        except FolioException as e:
            return self._fail(e)

    def upsert_document(self, doc: PortfolioDocument) -> Result[None]:
        """Create or overwrite the portfolio row. Last writer wins."""
        try:
            self._require_configured("upsert_document")
            row = {
                "id": self.config.document_key,
                "data": doc.to_dict(),
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
            self._request(
                "POST",
                f"{self.base_url}/rest/v1/{self.config.table}",
                "upsert_document",
                json=row,
                headers=self._headers({
                    "Content-Type": "application/json",
                    "Prefer": "resolution=merge-duplicates,return=minimal",
                }),
            )
            logger.info(f"Portfolio row {self.config.document_key} saved")
            return Success(None)
        except FolioException as e:
            return self._fail(e)

    def public_url(self, key: str) -> str:
        """Public URL of an object in the image bucket."""
        return f"{self.base_url}/storage/v1/object/public/{self.config.bucket}/{quote(key)}"

    def upload_object(
        self,
        data: bytes,
        filename: Optional[str],
        category: Any,
        content_type: Optional[str] = None,
    ) -> Result[str]:
        """Store an image under a fresh key and return its public URL.

        Raises ValueError for an unknown category; every runtime failure is
        returned as ``Fail``.
        """
        category = UploadCategory(category)
        try:
            self._require_configured("upload_object")
            if not data:
                raise InvalidUploadError("Upload is empty")
            if len(data) > self.config.max_upload_bytes:
                raise InvalidUploadError(
                    f"Upload is {len(data)} bytes, limit is {self.config.max_upload_bytes}",
                    context={"size": len(data)},
                )

            key = generate_object_key(category, filename)
            mime = content_type or mimetypes.guess_type(key)[0] or "application/octet-stream"
            logger.info(f"Uploading {len(data)} bytes to {self.config.bucket}/{key}")
            self._request(
                "POST",
                f"{self.base_url}/storage/v1/object/{self.config.bucket}/{quote(key)}",
                "upload_object",
                data=data,
                headers=self._headers({
                    "Content-Type": mime,
                    "cache-control": f"max-age={CACHE_CONTROL_SECONDS}",
                    "x-upsert": "false",
                }),
            )
            url = self.public_url(key)
            logger.info(f"Upload successful: {url}")
            return Success(url)
        except FolioException as e:
            return self._fail(e)
