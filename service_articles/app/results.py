"""
Result values returned by the cache core.

Reads, writes and refreshes report their outcome through these types instead
of raising, so partial failures stay visible to callers and tests.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from shared.errors import CacheWriteError


class ReadErrorKind(str, Enum):
    """Why a cache read produced no payload."""
    NOT_FOUND = "not_found"
    STORE_UNAVAILABLE = "store_unavailable"


class RefreshErrorKind(str, Enum):
    """Which step of a refresh failed."""
    UPSTREAM_FETCH_ERROR = "upstream_fetch_error"
    UPSTREAM_SHAPE_ERROR = "upstream_shape_error"
    CACHE_WRITE_ERROR = "cache_write_error"


@dataclass
class ReadResult:
    """Outcome of a single cache lookup."""
    payload: Optional[bytes] = None
    error: Optional[ReadErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def found(cls, payload: bytes) -> "ReadResult":
        return cls(payload=payload)

    @classmethod
    def not_found(cls) -> "ReadResult":
        return cls(error=ReadErrorKind.NOT_FOUND)

    @classmethod
    def store_unavailable(cls) -> "ReadResult":
        return cls(error=ReadErrorKind.STORE_UNAVAILABLE)


@dataclass
class PartialWriteResult:
    """Per-key accounting of one bulk write.

    The store has no multi-key transaction, so a failed write can leave some
    keys updated and others not. This records exactly which.
    """
    articles_total: int
    articles_written: int = 0
    summary_written: bool = False
    failed_keys: List[str] = field(default_factory=list)
    bytes_written: int = 0

    @property
    def ok(self) -> bool:
        return (
            self.summary_written
            and self.articles_written == self.articles_total
            and not self.failed_keys
        )

    @property
    def writes_attempted(self) -> int:
        return self.articles_total + 1

    def raise_for_failure(self) -> None:
        """Raise CacheWriteError unless every sub-write succeeded."""
        if self.ok:
            return
        raise CacheWriteError(
            f"{len(self.failed_keys)} of {self.writes_attempted} cache writes failed",
            details=self.to_dict()
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RefreshSummary:
    """What a successful refresh changed."""
    articles_written: int
    summary_written: bool
    orphaned_slugs: List[str] = field(default_factory=list)
    duration_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RefreshResult:
    """Outcome of one refresh cycle."""
    summary: Optional[RefreshSummary] = None
    error: Optional[RefreshErrorKind] = None
    message: str = ""
    write_result: Optional[PartialWriteResult] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error.value if self.error else None,
            "message": self.message,
            "summary": self.summary.to_dict() if self.summary else None,
            "write_result": self.write_result.to_dict() if self.write_result else None,
        }
