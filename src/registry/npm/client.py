"""NPM registry client: cached package lookups with normalized results."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlsplit

from constants import Constants
from cache.memory import MemCache
from cache.package_cache import MemoryPackageCache, PackageCache
from common.errors import ExternalHostError
from common.http_client import JsonResponse, get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

from .errors import classify_error
from .models import LookupResult, LookupStatus, NpmDependency
from .npmrc import NpmrcResolver
from .releases import map_releases
from .source import get_package_source

logger = logging.getLogger(__name__)

Fetcher = Callable[..., JsonResponse]

DEPRECATION_TEMPLATE = (
    'On registry `{registry_url}`, the "latest" version of dependency `{package_name}` '
    "has the following deprecation notice:\n\n`{notice}`\n\n"
    "Marking the latest version of an npm package as deprecated results in the entire "
    "package being considered deprecated, so contact the package author if you think "
    "this is a mistake."
)


def _strip_authorization(headers: Dict[str, str]) -> Dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() != "authorization"}


class NpmDatasource:
    """Resolve npm package metadata through a run cache and a persistent cache.

    One instance is meant to live for one processing run; call
    ``reset_cache`` at run boundaries. Concurrent lookups of the same name
    are not de-duplicated.
    """

    def __init__(
        self,
        resolver: Optional[NpmrcResolver] = None,
        package_cache: Optional[PackageCache] = None,
        fetch: Optional[Fetcher] = None,
        memcache: Optional[MemCache[NpmDependency]] = None,
        cache_minutes: Optional[int] = None,
        public_scopes: Optional[List[str]] = None,
    ):
        self.resolver = resolver or NpmrcResolver()
        self.package_cache = package_cache if package_cache is not None else MemoryPackageCache()
        self._fetch = fetch or get_json
        self.memcache = memcache if memcache is not None else MemCache()
        self._cache_minutes = cache_minutes
        self._public_scopes = public_scopes

    @property
    def cache_minutes(self) -> int:
        if self._cache_minutes is not None:
            return self._cache_minutes
        return Constants.NPM_CACHE_MINUTES

    @property
    def public_scopes(self) -> List[str]:
        if self._public_scopes is not None:
            return self._public_scopes
        return Constants.NPM_PUBLIC_SCOPES

    def reset_mem_cache(self) -> None:
        self.memcache.reset()

    def reset_cache(self) -> None:
        """Clear run-scoped state; the persistent cache is left alone."""
        self.reset_mem_cache()

    def get_dependency(self, package_name: str) -> Optional[NpmDependency]:
        """Look up a package, returning None when it is unavailable.

        Raises:
            ExternalHostError: the public registry failed unexpectedly.
        """
        result = self.lookup(package_name)
        if result.status is LookupStatus.HOST_FAILURE:
            assert result.error is not None
            raise result.error from result.error.err
        return result.dependency

    def lookup(self, package_name: str) -> LookupResult:
        """Look up a package and report the outcome as a LookupResult."""
        logger.debug("npm lookup: %s", package_name)

        cached = self.memcache.get(package_name)
        if cached is not None:
            logger.debug("Returning run-cached result for %s", package_name)
            return LookupResult.found(cached)

        target = self.resolver.resolve(package_name)
        package_url = target.package_url

        persisted = self.package_cache.get(Constants.CACHE_NAMESPACE_NPM, package_url)
        if persisted:
            dep = self._from_persisted(package_name, persisted)
            if dep is not None:
                logger.debug("Returning persisted result for %s", package_name)
                return LookupResult.found(dep)

        uri = urlsplit(package_url)
        headers = {"accept": Constants.NPM_ACCEPT_HEADER}
        headers.update(target.headers)
        if uri.hostname == Constants.NPM_REGISTRY_HOST and not uri.path.startswith("/@"):
            # Unauthenticated requests for public packages stay shareable by HTTP caches
            headers = _strip_authorization(headers)

        try:
            with Timer() as timer:
                raw = self._fetch(package_url, headers=headers)
            if is_debug_enabled(logger):
                logger.debug(
                    "npm packument fetched",
                    extra=extra_context(
                        event="http_response",
                        component="npm",
                        target=safe_url(package_url),
                        duration_ms=timer.duration_ms(),
                    ),
                )
            packument = raw.body
            if not isinstance(packument, dict) or not packument.get("versions"):
                logger.debug("No versions returned", extra=extra_context(package_name=package_name))
                return LookupResult.not_found("no versions")
            dep = self._normalize(package_name, packument, target.registry_url)
        except Exception as err:  # pylint: disable=broad-exception-caught
            return classify_error(err, uri.hostname, package_name, package_url)

        self.memcache.set(package_name, dep)
        if self._is_persistable(package_name, raw.authorization):
            self._persist(package_url, dep)
        return LookupResult.found(dep)

    @staticmethod
    def _from_persisted(package_name: str, persisted: Any) -> Optional[NpmDependency]:
        """Rebuild a persisted entry; anything not dependency-shaped is a miss."""
        if isinstance(persisted, dict) and isinstance(persisted.get("name"), str):
            try:
                return NpmDependency.from_dict(persisted)
            except (KeyError, TypeError, AttributeError, ValueError):
                pass
        logger.debug("Ignoring malformed persisted entry for %s", package_name)
        return None

    def _is_persistable(self, package_name: str, authorized: bool) -> bool:
        """Only unauthenticated responses for public packages may be shared."""
        if authorized:
            return False
        if not package_name.startswith("@"):
            return True
        return package_name.split("/")[0] in self.public_scopes

    def _persist(self, package_url: str, dep: NpmDependency) -> None:
        try:
            self.package_cache.set(Constants.CACHE_NAMESPACE_NPM, package_url, dep.to_dict(), self.cache_minutes)
        except OSError as exc:
            logger.warning("Couldn't write package cache for %s: %s", safe_url(package_url), exc)

    def _normalize(self, package_name: str, packument: Dict[str, Any], registry_url: str) -> NpmDependency:
        versions = packument["versions"]
        dist_tags = packument.get("dist-tags") or {}
        latest = versions.get(dist_tags.get("latest")) or {}

        repository = packument.get("repository") or latest.get("repository")
        homepage = packument.get("homepage") or latest.get("homepage")
        source = get_package_source(repository)

        dep = NpmDependency(
            name=packument.get("name") or package_name,
            registry_url=registry_url,
            dist_tags=dict(dist_tags),
            homepage=homepage,
            source_url=source.source_url,
            source_directory=source.source_directory,
        )
        if latest.get("deprecated"):
            dep.deprecation_message = DEPRECATION_TEMPLATE.format(
                registry_url=registry_url,
                package_name=package_name,
                notice=latest["deprecated"],
            )
            dep.deprecation_source = Constants.DATASOURCE_ID_NPM
        dep.releases = map_releases(packument, dep)
        if is_debug_enabled(logger):
            logger.debug(
                "Normalized %s: %d releases",
                package_name,
                len(dep.releases),
                extra=extra_context(component="npm", source_url=dep.source_url),
            )
        return dep


_default_datasource: Optional[NpmDatasource] = None


def _get_default_datasource() -> NpmDatasource:
    global _default_datasource  # pylint: disable=global-statement
    if _default_datasource is None:
        _default_datasource = NpmDatasource()
    return _default_datasource


def get_dependency(package_name: str) -> Optional[NpmDependency]:
    """Module-level lookup using a shared default datasource."""
    return _get_default_datasource().get_dependency(package_name)


def reset_cache() -> None:
    """Clear the run cache of the shared default datasource."""
    if _default_datasource is not None:
        _default_datasource.reset_cache()


__all__ = [
    "NpmDatasource",
    "ExternalHostError",
    "get_dependency",
    "reset_cache",
]
