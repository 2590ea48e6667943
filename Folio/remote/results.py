"""Success/Fail results returned by every remote-facing operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from ..utils.errors import ErrorKind, FolioException

T = TypeVar("T")


@dataclass(frozen=True)
class RemoteError:
    """Why a remote operation failed."""
    kind: ErrorKind
    message: str
    status_code: Optional[int] = None

    @classmethod
    def from_exception(cls, error: FolioException) -> "RemoteError":
        return cls(
            kind=error.kind or ErrorKind.REMOTE_UNAVAILABLE,
            message=error.message,
            status_code=error.status_code,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
        }


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    ok = True


@dataclass(frozen=True)
class Fail:
    error: RemoteError

    ok = False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


Result = Union[Success[T], Fail]
