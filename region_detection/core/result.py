"""Success/failure values returned by pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories."""

    INPUT = "input"
    GEOMETRY = "geometry"
    PIPELINE = "pipeline"


@dataclass(frozen=True)
class Result:
    """Outcome of an operation: truthy on success, message and kind on failure."""

    ok: bool = True
    message: str = ""
    kind: ErrorKind | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, message: str = "") -> "Result":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result":
        return cls(ok=False, message=message, kind=kind)


__all__ = ["ErrorKind", "Result"]
