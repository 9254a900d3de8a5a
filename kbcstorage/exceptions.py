import http
from typing import Dict, Optional


class KbcError(Exception):
    r"""Base class of all errors raised by :mod:`kbcstorage`."""


class ConfigurationError(KbcError):
    r"""Raised when the provider or a resource is misconfigured."""


class AuthenticationError(KbcError):
    r"""Raised when the Storage API token is rejected."""


class TransportError(KbcError):
    r"""A connection-level failure: the request never produced a response.
    The underlying :class:`requests.RequestException` is chained as the
    cause.
    """


class DecodeError(KbcError):
    r"""Raised when a response body does not match the expected shape."""
    def __init__(self, message: str, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.body = body


class HTTPException(KbcError):
    r"""An HTTP exception, with detailed information and headers."""
    def __init__(
        self,
        status_code: int,
        detail: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        # Derived from starlette/blob/master/starlette/exceptions.py
        if not detail:
            try:
                detail = http.HTTPStatus(status_code).phrase
            except ValueError:
                detail = 'Unknown error'
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.headers = headers

    def __str__(self) -> str:
        return f"{self.status_code}: {self.detail}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        return (f"{class_name}(status_code={self.status_code!r}, "
                f"detail={self.detail!r})")


class JobFailedError(KbcError):
    r"""Raised when an asynchronous Storage job finishes with status
    ``error``.
    """
    def __init__(self, job_id: str, message: Optional[str] = None) -> None:
        self.job_id = job_id
        self.message = message or 'no error detail was reported'
        super().__init__(
            f"Storage job {job_id} failed: {self.message}")


class PollingTimeoutError(KbcError):
    r"""Raised when a poll loop exceeds its attempt count or deadline."""


class PollingCancelledError(KbcError):
    r"""Raised when a poll loop is cancelled by its caller."""
