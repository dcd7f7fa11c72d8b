"""Outcome of an API request, delivered to registered callbacks."""

from __future__ import annotations

import logging
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger("kemai")


class ApiResult(Generic[T]):
    """Holds the value or the error of one request and notifies listeners.

    Callbacks receive the result object itself. A callback registered after
    the outcome is known is called straight away.
    """

    def __init__(self) -> None:
        self._ready = False
        self._error: Optional[str] = None
        self._result: Optional[T] = None
        self._ready_callbacks: list[Callable[[ApiResult[T]], None]] = []
        self._error_callbacks: list[Callable[[ApiResult[T]], None]] = []

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def result(self) -> Optional[T]:
        """The wrapped value; ``None`` until a result has been set."""
        return self._result

    @property
    def error_message(self) -> str:
        return self._error or ""

    def on_ready(self, callback: Callable[[ApiResult[T]], None]) -> ApiResult[T]:
        """Call ``callback`` once a value is available."""
        self._ready_callbacks.append(callback)
        if self._ready and self._error is None:
            callback(self)
        return self

    def on_error(self, callback: Callable[[ApiResult[T]], None]) -> ApiResult[T]:
        """Call ``callback`` once the request has failed."""
        self._error_callbacks.append(callback)
        if self.has_error():
            callback(self)
        return self

    def set_result(self, result: T) -> None:
        """Store the value and notify the ready listeners."""
        self._result = result
        self._ready = True
        for callback in list(self._ready_callbacks):
            callback(self)

    def set_error(self, message: str) -> None:
        """Store the error and notify the error listeners."""
        self._ready = True
        self._error = message
        logger.error("<=== %s", message)
        for callback in list(self._error_callbacks):
            callback(self)

    def has_error(self) -> bool:
        return self._ready and self._error is not None