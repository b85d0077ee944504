"""npm registry datasource: normalized, cached package metadata."""

from .client import NpmDatasource, get_dependency, reset_cache
from .models import (
    LookupResult,
    LookupStatus,
    NpmDependency,
    PackageSource,
    RegistryTarget,
    Release,
    RepositoryForm,
    RepositoryRef,
)
from .npmrc import NpmrcResolver

__all__ = [
    "NpmDatasource",
    "NpmrcResolver",
    "get_dependency",
    "reset_cache",
    "LookupResult",
    "LookupStatus",
    "NpmDependency",
    "PackageSource",
    "RegistryTarget",
    "Release",
    "RepositoryForm",
    "RepositoryRef",
]
