"""Remote document store and image bucket client."""

from .client import RemoteSyncClient, UploadCategory
from .results import Success, Fail, RemoteError

__all__ = ["RemoteSyncClient", "UploadCategory", "Success", "Fail", "RemoteError"]
