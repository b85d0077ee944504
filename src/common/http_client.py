"""Shared HTTP helpers used by the registry clients.

Encapsulates request/timeout error handling so registry modules receive
either a parsed JSON body or a structured ``HttpError``. This module is
dependency-light and can be imported by registry/* and cache/* without
cycles.
"""
from __future__ import annotations

import json
import logging
import socket
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from constants import Constants
from common.errors import HttpError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

_DNS_FAILURE_MARKERS = (
    "NameResolutionError",
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
    "No address associated with hostname",
)


@dataclass
class JsonResponse:
    """Parsed JSON response plus whether the request carried credentials."""

    body: Any
    authorization: bool
    status_code: int = 200


def has_authorization(headers: Optional[Dict[str, str]]) -> bool:
    """Return True when the header map carries a non-empty Authorization header."""
    if not headers:
        return False
    return any(k.lower() == "authorization" and v for k, v in headers.items())


def _is_dns_failure(exc: BaseException) -> bool:
    """Walk the exception chain looking for a name-resolution failure."""
    seen = set()
    pending = [exc]
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        text = f"{type(current).__name__}: {current}"
        if any(marker in text for marker in _DNS_FAILURE_MARKERS):
            return True
        pending.append(current.__cause__)
        pending.append(current.__context__)
        pending.extend(a for a in getattr(current, "args", ()) if isinstance(a, BaseException))
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            pending.append(reason)
    return False


def _request(url: str, headers: Optional[Dict[str, str]], **kwargs: Any) -> requests.Response:
    """GET with retries on timeouts and non-DNS connection failures."""
    safe_target = safe_url(url)
    last_error: Optional[HttpError] = None

    for attempt in range(Constants.HTTP_RETRY_MAX):
        if attempt:
            time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** (attempt - 1)))
        with Timer() as t:
            try:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1,
                        ),
                    )
                res = requests.get(url, headers=headers, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
            except requests.Timeout as exc:
                last_error = HttpError(
                    f"Request timed out after {Constants.REQUEST_TIMEOUT} seconds",
                    url=url,
                    code="ETIMEDOUT",
                    name="TimeoutError",
                )
                last_error.__cause__ = exc
                logger.debug(
                    "HTTP timeout",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        outcome="timeout",
                        attempt=attempt + 1,
                        target=safe_target,
                    ),
                )
                continue
            except requests.RequestException as exc:  # includes ConnectionError
                if _is_dns_failure(exc):
                    raise HttpError(
                        f"DNS lookup failed for {safe_target}",
                        url=url,
                        code="ENOTFOUND",
                    ) from exc
                last_error = HttpError(str(exc), url=url, code="ECONNERROR")
                last_error.__cause__ = exc
                logger.debug(
                    "HTTP request exception",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        outcome="request_exception",
                        attempt=attempt + 1,
                        target=safe_target,
                    ),
                )
                continue

            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        status_code=res.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                    ),
                )
            return res

    assert last_error is not None
    raise last_error


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> JsonResponse:
    """Perform a GET request and parse the JSON body.

    Args:
        url: Target URL
        headers: Optional request headers
        **kwargs: Additional requests.get parameters

    Returns:
        JsonResponse with the parsed body and whether credentials were sent.

    Raises:
        HttpError: on transport failures, HTTP status >= 400, or a body that
            is not valid JSON (``name == "ParseError"``).
    """
    res = _request(url, headers, **kwargs)

    if res.status_code >= 400:
        raise HttpError(
            f"Response code {res.status_code}",
            url=url,
            status_code=res.status_code,
            name="HTTPError",
            body=res.text,
        )

    try:
        body = json.loads(res.text)
    except (json.JSONDecodeError, TypeError) as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=res.status_code,
                    target=safe_url(url),
                ),
            )
        raise HttpError(
            f"Couldn't decode JSON from {safe_url(url)}",
            url=url,
            status_code=res.status_code,
            name="ParseError",
            body=res.text,
        ) from exc

    return JsonResponse(body=body, authorization=has_authorization(headers), status_code=res.status_code)
