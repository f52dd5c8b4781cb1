"""
统一错误与 Result 封装，便于工作流按错误类型给出准确提示。

Every failure a workflow can report is one of the classes below. Callers
branch on the class (or on ``code``), never on message text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union, cast


class ErrorSeverity(Enum):
    WARNING = "warning"      # expected outcome, not a system fault
    ERROR = "error"          # workflow failed
    CRITICAL = "critical"    # failed after irreversible progress


@dataclass(eq=False)
class FloralGalleryError(Exception):
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    code: str = "UNKNOWN"
    context: Dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    @property
    def is_fault(self) -> bool:
        return self.severity is not ErrorSeverity.WARNING


@dataclass(eq=False)
class ConfigurationError(FloralGalleryError):
    code: str = "CONFIGURATION_ERROR"


@dataclass(eq=False)
class ValidationError(FloralGalleryError):
    code: str = "VALIDATION_ERROR"


@dataclass(eq=False)
class PublicationError(FloralGalleryError):
    code: str = "PUBLICATION_ERROR"


@dataclass(eq=False)
class MetadataError(FloralGalleryError):
    code: str = "METADATA_ERROR"


@dataclass(eq=False)
class LedgerRejected(FloralGalleryError):
    code: str = "LEDGER_REJECTED"


@dataclass(eq=False)
class UserDeclined(FloralGalleryError):
    severity: ErrorSeverity = ErrorSeverity.WARNING
    code: str = "USER_DECLINED"


@dataclass(eq=False)
class TransportError(FloralGalleryError):
    code: str = "TRANSPORT_ERROR"


@dataclass(eq=False)
class PartialBatchFailure(FloralGalleryError):
    """A batch mint stopped after ``completed`` of ``requested`` copies were confirmed."""

    severity: ErrorSeverity = ErrorSeverity.CRITICAL
    code: str = "PARTIAL_BATCH_FAILURE"
    completed: int = 0
    requested: int = 0
    cause: Optional[FloralGalleryError] = None

    @classmethod
    def after(cls, completed: int, requested: int, cause: FloralGalleryError) -> "PartialBatchFailure":
        return cls(
            message=(
                f"{completed} of {requested} copies were saved before the batch stopped: "
                f"{cause.message}"
            ),
            completed=completed,
            requested=requested,
            cause=cause,
            context={"completed": completed, "requested": requested, "cause": cause.code},
        )


T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass
class Result(Generic[T, E]):
    """函数式结果封装，fan-out 时每个分支各自返回一个 Result。"""

    _value: Union[T, E]
    _is_ok: bool

    @classmethod
    def ok(cls, value: T) -> "Result[T, E]":
        return cls(_value=value, _is_ok=True)

    @classmethod
    def err(cls, error: E) -> "Result[T, E]":
        return cls(_value=error, _is_ok=False)

    def is_ok(self) -> bool:
        return self._is_ok

    @property
    def error(self) -> Optional[E]:
        return None if self._is_ok else cast(E, self._value)

    def unwrap(self) -> T:
        if not self._is_ok:
            raise cast(E, self._value)
        return cast(T, self._value)

    def unwrap_or(self, default: T) -> T:
        return cast(T, self._value) if self._is_ok else default

    def map(self, fn) -> "Result[T, E]":
        if self._is_ok:
            return Result.ok(fn(self._value))  # type: ignore[arg-type]
        return self
