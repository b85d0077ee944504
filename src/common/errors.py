"""Exception types shared across the HTTP and registry layers."""

from __future__ import annotations

from typing import Optional


class HttpError(Exception):
    """Structured transport failure raised by the HTTP client.

    Attributes:
        status_code: HTTP status, or None when no response was received.
        code: Low-level error code (e.g. "ENOTFOUND", "ETIMEDOUT").
        name: Failure kind ("HTTPError", "ParseError", "RequestError", ...).
        body: Captured response body, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        name: str = "RequestError",
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.code = code
        self.name = name
        self.body = body


class ExternalHostError(Exception):
    """Fatal failure of an external host that must halt the caller's run."""

    def __init__(self, err: BaseException, host_type: Optional[str] = None):
        super().__init__(f"External host error: {err}")
        self.err = err
        self.host_type = host_type
