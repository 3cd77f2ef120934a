"""
Typed results returned by each acquisition layer.

Fetchers and the decode step never raise for expected failures; they return
a FetchOutcome and let the TileDescriptor decide what the caller sees.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FetchStatus(str, Enum):
    SUCCESS = "success"
    ABSENT = "absent"
    RECOVERABLE = "recoverable"
    FATAL = "fatal"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one fetch or decode attempt."""

    status: FetchStatus
    message: str = ""
    error: BaseException | None = None
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS

    @classmethod
    def success(cls, value: Any = None, message: str = "") -> "FetchOutcome":
        return cls(FetchStatus.SUCCESS, message=message, value=value)

    @classmethod
    def absent(cls, message: str = "", error: BaseException | None = None) -> "FetchOutcome":
        return cls(FetchStatus.ABSENT, message=message, error=error)

    @classmethod
    def recoverable(cls, message: str, error: BaseException | None = None) -> "FetchOutcome":
        return cls(FetchStatus.RECOVERABLE, message=message, error=error)

    @classmethod
    def fatal(cls, message: str, error: BaseException | None = None) -> "FetchOutcome":
        return cls(FetchStatus.FATAL, message=message, error=error)
