"""Data models for npm package lookups."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from common.errors import ExternalHostError


@dataclass
class RegistryTarget:
    """Where and how to fetch a package: produced by the registry resolver."""
    headers: Dict[str, str]
    package_url: str
    registry_url: str


class RepositoryForm(Enum):
    """Shapes a packument ``repository`` field may take."""
    ABSENT = "absent"
    STRING = "string"
    OBJECT = "object"


@dataclass(frozen=True)
class RepositoryRef:
    """Tagged view over a raw ``repository`` field."""
    form: RepositoryForm
    url: Optional[str] = None
    directory: Optional[str] = None


@dataclass(frozen=True)
class PackageSource:
    """Canonical source repository location."""
    source_url: Optional[str] = None
    source_directory: Optional[str] = None


@dataclass
class Release:
    """One published version. source_url/source_directory are overrides only."""
    version: str
    git_ref: Optional[str] = None
    dependencies: Optional[Dict[str, str]] = None
    dev_dependencies: Optional[Dict[str, str]] = None
    release_timestamp: Optional[str] = None
    is_deprecated: Optional[bool] = None
    source_url: Optional[str] = None
    source_directory: Optional[str] = None

    _FIELDS = (
        ("version", "version"),
        ("git_ref", "gitRef"),
        ("dependencies", "dependencies"),
        ("dev_dependencies", "devDependencies"),
        ("release_timestamp", "releaseTimestamp"),
        ("is_deprecated", "isDeprecated"),
        ("source_url", "sourceUrl"),
        ("source_directory", "sourceDirectory"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Registry-style dict, omitting unset fields."""
        return {
            key: getattr(self, attr)
            for attr, key in self._FIELDS
            if getattr(self, attr) is not None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Release":
        return cls(**{attr: data.get(key) for attr, key in cls._FIELDS})


@dataclass
class NpmDependency:
    """Normalized, cacheable description of an npm package."""
    name: str
    registry_url: str
    dist_tags: Dict[str, str] = field(default_factory=dict)
    releases: List[Release] = field(default_factory=list)
    homepage: Optional[str] = None
    source_url: Optional[str] = None
    source_directory: Optional[str] = None
    deprecation_message: Optional[str] = None
    deprecation_source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Registry-style dict used for the persistent cache and CLI output."""
        data: Dict[str, Any] = {"name": self.name}
        optional = (
            ("homepage", self.homepage),
            ("sourceUrl", self.source_url),
            ("sourceDirectory", self.source_directory),
        )
        data.update({k: v for k, v in optional if v is not None})
        data["dist-tags"] = dict(self.dist_tags)
        data["registryUrl"] = self.registry_url
        data["releases"] = [r.to_dict() for r in self.releases]
        if self.deprecation_message is not None:
            data["deprecationMessage"] = self.deprecation_message
        if self.deprecation_source is not None:
            data["deprecationSource"] = self.deprecation_source
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NpmDependency":
        return cls(
            name=data["name"],
            registry_url=data.get("registryUrl", ""),
            dist_tags=dict(data.get("dist-tags") or {}),
            releases=[Release.from_dict(r) for r in data.get("releases") or []],
            homepage=data.get("homepage"),
            source_url=data.get("sourceUrl"),
            source_directory=data.get("sourceDirectory"),
            deprecation_message=data.get("deprecationMessage"),
            deprecation_source=data.get("deprecationSource"),
        )


class LookupStatus(Enum):
    """Outcome of a dependency lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    HOST_FAILURE = "host_failure"


@dataclass
class LookupResult:
    """Explicit lookup outcome: expected misses are values, not exceptions."""
    status: LookupStatus
    dependency: Optional[NpmDependency] = None
    error: Optional[ExternalHostError] = None
    reason: Optional[str] = None

    @classmethod
    def found(cls, dependency: NpmDependency) -> "LookupResult":
        return cls(LookupStatus.FOUND, dependency=dependency)

    @classmethod
    def not_found(cls, reason: str) -> "LookupResult":
        return cls(LookupStatus.NOT_FOUND, reason=reason)

    @classmethod
    def host_failure(cls, error: ExternalHostError) -> "LookupResult":
        return cls(LookupStatus.HOST_FAILURE, error=error, reason=str(error))
