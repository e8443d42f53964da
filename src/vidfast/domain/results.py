"""Per-step outcomes for best-effort operations.

Each network or parsing step returns a ``StepResult`` instead of raising.
Callers aggregate the successful values and keep the failures around for
logging and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Why a single unit of work was dropped."""

    NETWORK = "network"
    HTTP_STATUS = "http_status"
    DECODE = "decode"
    MISSING_PATTERN = "missing_pattern"
    MISSING_FIELD = "missing_field"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class StepFailure:
    """A dropped unit of work."""

    step: str
    kind: ErrorKind
    detail: str = ""
    url: str | None = None


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """Either a value or the failure that prevented it."""

    value: T | None = None
    failure: StepFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> StepResult[T]:
        return cls(value=value)

    @classmethod
    def fail(
        cls,
        step: str,
        kind: ErrorKind,
        detail: str = "",
        url: str | None = None,
    ) -> StepResult[T]:
        return cls(failure=StepFailure(step=step, kind=kind, detail=detail, url=url))
