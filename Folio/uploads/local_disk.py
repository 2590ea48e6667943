"""Development uploads written to a local directory."""

from __future__ import annotations

import logging
import re
import time
import uuid
from pathlib import Path
from typing import Union

logger = logging.getLogger("FOLIO.Uploads")

_UNSAFE_KIND = re.compile(r"[^a-z0-9\-_]", re.IGNORECASE)


def sanitize_kind(kind: str) -> str:
    """Reduce ``kind`` to ``[a-z0-9-_]``; empty results become ``generic``."""
    return _UNSAFE_KIND.sub("", kind or "").lower() or "generic"


def _extension(filename: str) -> str:
    suffix = Path(filename or "").suffix
    return suffix if suffix and suffix != "." else ".png"


class LocalDiskUploader:
    """Stores uploads under ``root/<kind>/`` and returns a relative URL."""

    def __init__(self, root: Union[str, Path], url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, data: bytes, filename: str, kind: str = "generic") -> str:
        safe_kind = sanitize_kind(kind)
        name = f"{int(time.time() * 1000)}-{uuid.uuid4()}{_extension(filename)}"

        upload_dir = self.root / safe_kind
        upload_dir.mkdir(parents=True, exist_ok=True)
        (upload_dir / name).write_bytes(data)

        url = f"{self.url_prefix}/{safe_kind}/{name}"
        logger.info(f"Stored {len(data)} bytes at {url}")
        return url
