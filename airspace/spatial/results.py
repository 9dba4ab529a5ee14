"""Explicit outcome types for geometry operations.

Each pipeline stage declares, once per call site, which geometry errors it
can recover from and what value stands in when they occur. Anything not
declared recoverable is fatal and propagates.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from airspace.validation.errors import GeometryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OpStatus(StrEnum):
    """How a geometry operation concluded."""

    SUCCESS = "success"  # operation produced a geometry
    EMPTY = "empty"  # operation produced nothing (disjoint, fully covered)
    FALLBACK = "fallback"  # recoverable failure, fallback value substituted


@dataclass(frozen=True)
class OpResult(Generic[T]):
    """Outcome of a geometry operation.

    Attributes:
        status: SUCCESS, EMPTY or FALLBACK
        value: Operation result, fallback value, or None when EMPTY
        error: The recovered exception when status is FALLBACK
    """

    status: OpStatus
    value: T | None = None
    error: GeometryError | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is OpStatus.SUCCESS

    @property
    def is_empty(self) -> bool:
        return self.status is OpStatus.EMPTY

    @property
    def used_fallback(self) -> bool:
        return self.status is OpStatus.FALLBACK


def run_with_fallback(
    operation: Callable[..., T | None],
    *args: Any,
    fallback: T | None,
    recoverable: tuple[type[GeometryError], ...],
) -> OpResult[T]:
    """Run a geometry operation under a declared fallback policy.

    Args:
        operation: Kernel operation; returning None means "empty result"
        *args: Positional arguments for the operation
        fallback: Value substituted when a recoverable error is raised
        recoverable: Error types absorbed locally; anything else propagates

    Returns:
        OpResult describing the outcome
    """
    try:
        value = operation(*args)
    except recoverable as e:
        logger.debug(f"{getattr(operation, '__name__', 'operation')} recovered from: {e}")
        return OpResult(status=OpStatus.FALLBACK, value=fallback, error=e)

    if value is None:
        return OpResult(status=OpStatus.EMPTY)
    return OpResult(status=OpStatus.SUCCESS, value=value)
