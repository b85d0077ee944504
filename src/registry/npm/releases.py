"""Map a packument's version map onto Release records."""

from __future__ import annotations

from typing import Any, Dict, List

from .models import NpmDependency, Release
from .source import get_package_source


def map_releases(packument: Dict[str, Any], dependency: NpmDependency) -> List[Release]:
    """Build releases in the registry's version-map order.

    Per-version source locations are attached only when they differ from the
    dependency-level values.

    Args:
        packument: Raw registry response.
        dependency: Dependency record carrying the package-level source.

    Returns:
        List of Release objects.
    """
    versions = packument.get("versions") or {}
    times = packument.get("time")
    if not isinstance(times, dict):
        times = {}
    releases = []
    for version, manifest in versions.items():
        manifest = manifest if isinstance(manifest, dict) else {}
        release = Release(
            version=version,
            git_ref=manifest.get("gitHead"),
            dependencies=manifest.get("dependencies"),
            dev_dependencies=manifest.get("devDependencies"),
        )
        if times.get(version):
            release.release_timestamp = times[version]
        if manifest.get("deprecated"):
            release.is_deprecated = True

        source = get_package_source(manifest.get("repository"))
        if source.source_url and source.source_url != dependency.source_url:
            release.source_url = source.source_url
        if source.source_directory and source.source_directory != dependency.source_directory:
            release.source_directory = source.source_directory
        releases.append(release)
    return releases
