"""
Stage Results - Explicit outcomes for pipeline stages.

Fetches and extraction stages return one of these instead of raising, so
the partial-failure policy (skip a failed sibling, keep going) is visible
at every call site.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union


T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """The stage produced a value."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """The stage ran but the markup held nothing usable."""

    reason: str = ""


@dataclass(frozen=True)
class TransientError:
    """The stage failed for a reason that may not repeat (timeout, 5xx)."""

    reason: str
    error: Optional[BaseException] = None


StageResult = Union[Found[T], NotFound, TransientError]


__all__ = ["Found", "NotFound", "TransientError", "StageResult"]
