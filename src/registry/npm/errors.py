"""Classify npm fetch failures as benign misses or fatal host failures."""

from __future__ import annotations

import logging
from typing import Optional

from constants import Constants
from common.errors import ExternalHostError
from common.logging_utils import REDACTED, extra_context, safe_url

from .models import LookupResult

logger = logging.getLogger(__name__)


def classify_error(
    err: BaseException,
    host: Optional[str],
    package_name: str,
    package_url: str,
) -> LookupResult:
    """Map a failed lookup onto a LookupResult.

    401/402/403/404 and DNS failures are misses on any registry. Anything else
    is a host failure on the public registry and a miss elsewhere.

    Args:
        err: Exception raised while fetching or normalizing.
        host: Host of the registry target.
        package_name: Requested package name (for logs).
        package_url: Registry URL of the package (for logs).

    Returns:
        LookupResult with NOT_FOUND or HOST_FAILURE status.
    """
    status_code = getattr(err, "status_code", None)
    code = getattr(err, "code", None)
    context = extra_context(
        event="lookup_failure",
        component="npm",
        package_name=package_name,
        target=safe_url(package_url),
        status_code=status_code,
        error_code=code,
    )

    if status_code in (401, 403):
        logger.debug("Dependency lookup failure: unauthorized", extra=context)
        return LookupResult.not_found("unauthorized")
    if status_code == 402:
        logger.debug("Dependency lookup failure: payment required", extra=context)
        return LookupResult.not_found("payment required")
    if status_code == 404 or code == "ENOTFOUND":
        logger.debug("Dependency lookup failure: not found", extra=context)
        return LookupResult.not_found("not found")

    if host == Constants.NPM_REGISTRY_HOST:
        if getattr(err, "name", None) == "ParseError" and getattr(err, "body", None):
            err.body = REDACTED  # type: ignore[attr-defined]
        logger.debug("Dependency lookup failure: host error", extra=context)
        return LookupResult.host_failure(ExternalHostError(err, host_type=Constants.DATASOURCE_ID_NPM))

    logger.debug("Dependency lookup failure: unknown error on third-party registry", extra=context)
    return LookupResult.not_found("registry error")
