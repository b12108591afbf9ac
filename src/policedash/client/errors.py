"""Error taxonomy shared by every face-recognition API accessor."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar

LOGGER = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class ApiError(Exception):
    """Base error carrying a message, an HTTP-like status code and the raw response body."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status_code={self.status_code!r})"


class ClientValidationError(ApiError):
    """Input rejected before any request was issued."""

    def __init__(self, message: str, response: Any = None) -> None:
        super().__init__(message, 400, response)


class NetworkError(ApiError):
    """No response was received (connection failure, timeout or request setup error)."""

    def __init__(self, message: str, response: Any = None) -> None:
        super().__init__(message, 0, response)


class HttpStatusError(ApiError):
    """The backend answered with a 4xx/5xx status."""


class UnknownError(ApiError):
    """Fallback for failures that are not already part of the taxonomy."""


def wrap_errors(fallback_message: str) -> Callable[[F], F]:
    """Re-raise non-:class:`ApiError` failures as :class:`UnknownError`.

    Errors that already belong to the taxonomy pass through unchanged so the
    caller sees the original message and status code.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except ApiError:
                raise
            except Exception as exc:
                LOGGER.debug("%s failed: %s", func.__name__, exc, exc_info=True)
                raise UnknownError(fallback_message, 500) from exc

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = [
    "ApiError",
    "ClientValidationError",
    "NetworkError",
    "HttpStatusError",
    "UnknownError",
    "wrap_errors",
]
