"""Resolve registry URLs and auth headers for npm package names from .npmrc."""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, Optional
from urllib.parse import quote, urljoin, urlsplit

from constants import Constants

from .models import RegistryTarget

logger = logging.getLogger(__name__)

_ENV_REF = re.compile(r"\$\{([^}]+)\}")


def _expand_env(value: str) -> str:
    return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), value)


def parse_npmrc(text: str) -> Dict[str, str]:
    """Parse .npmrc content into a flat key/value mapping."""
    config: Dict[str, str] = {}
    for raw_line in (text or "").splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("#", ";")) or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        config[key.strip()] = _expand_env(value)
    return config


class NpmrcResolver:
    """Registry resolver backed by .npmrc settings.

    Resolution is deterministic for a given name and configuration.
    """

    def __init__(self, npmrc_text: Optional[str] = None, default_registry: Optional[str] = None):
        self.config = parse_npmrc(npmrc_text or "")
        self.default_registry = default_registry or Constants.REGISTRY_URL_NPM

    @classmethod
    def from_file(cls, path: Optional[str]) -> "NpmrcResolver":
        """Load a resolver from an .npmrc file; a missing file yields defaults."""
        if not path:
            return cls()
        try:
            with open(os.path.expanduser(path), "r", encoding="utf-8") as fh:
                return cls(fh.read())
        except FileNotFoundError:
            logger.warning(".npmrc not found at %s, using default registry", path)
            return cls()

    def registry_for(self, package_name: str) -> str:
        registry_url = None
        scope = package_name.split("/")[0]
        if scope.startswith("@"):
            registry_url = self.config.get(f"{scope}:registry")
        registry_url = registry_url or self.config.get("registry") or self.default_registry
        return registry_url.rstrip("/") + "/"

    def _auth_header(self, registry_url: str) -> Optional[str]:
        """Find credentials for the registry, trying the longest path prefix first."""
        parts = urlsplit(registry_url)
        path = parts.path.rstrip("/")
        while True:
            prefix = f"//{parts.netloc}{path}/"
            token = self.config.get(f"{prefix}:_authToken")
            if token:
                return f"Bearer {token}"
            basic = self.config.get(f"{prefix}:_auth")
            if basic:
                return f"Basic {basic}"
            if not path:
                break
            path = path.rsplit("/", 1)[0]
        return None

    def resolve(self, package_name: str) -> RegistryTarget:
        """Return headers, package URL and registry URL for a package name."""
        registry_url = self.registry_for(package_name)
        encoded = quote(package_name, safe="")
        if encoded.startswith("%40"):
            encoded = "@" + encoded[3:]
        package_url = urljoin(registry_url, encoded)
        headers: Dict[str, str] = {}
        auth = self._auth_header(registry_url)
        if auth:
            headers["authorization"] = auth
        return RegistryTarget(headers=headers, package_url=package_url, registry_url=registry_url)
