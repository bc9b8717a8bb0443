"""Deferred fault collection.

An :class:`ErrorCapturer` runs one unit of translation.  Recoverable faults are
recorded and the unit yields ``None``; anything else keeps propagating, so a
malformed module still aborts the whole file.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar

from native_schema.core.schema.errors import ParserError, RecoverableParserError

T = TypeVar("T")

class Capture(Protocol):
    """Callable that runs a thunk, returning ``None`` for captured faults."""

    def __call__(self, fn: Callable[[], T]) -> T | None: ...

    def record(self, error: ParserError) -> None: ...

class ErrorCapturer:
    """Collects recoverable faults for one module build.

    Args:
        recoverable: Fault classes that are recorded instead of raised.
    """

    def __init__(
        self,
        recoverable: tuple[type[ParserError], ...] = (RecoverableParserError,),
    ) -> None:
        self.recoverable = recoverable
        self.errors: list[ParserError] = []

    def __call__(self, fn: Callable[[], T]) -> T | None:
        try:
            return fn()
        except self.recoverable as exc:
            self.errors.append(exc)
            return None

    def record(self, error: ParserError) -> None:
        """Record *error* without running anything."""
        if not isinstance(error, self.recoverable):
            raise error
        self.errors.append(error)

class PassthroughCapturer:
    """Captures nothing: every fault reaches the caller.

    Used for array element types, where the array itself absorbs any fault.
    """

    def __call__(self, fn: Callable[[], T]) -> T | None:
        return fn()

    def record(self, error: ParserError) -> None:
        raise error

PASSTHROUGH = PassthroughCapturer()
