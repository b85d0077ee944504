"""Normalize packument ``repository`` fields into a source location."""

from __future__ import annotations

from typing import Any

from .models import PackageSource, RepositoryForm, RepositoryRef


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def parse_repository(raw: Any) -> RepositoryRef:
    """Classify a raw repository field as absent, string or object form.

    Args:
        raw: ``repository`` value from a packument or version manifest.

    Returns:
        RepositoryRef; unknown shapes are treated as absent.
    """
    if _non_empty_str(raw):
        return RepositoryRef(RepositoryForm.STRING, url=raw)
    if isinstance(raw, dict):
        url = raw.get("url")
        directory = raw.get("directory")
        return RepositoryRef(
            RepositoryForm.OBJECT,
            url=url if _non_empty_str(url) else None,
            directory=directory if _non_empty_str(directory) else None,
        )
    return RepositoryRef(RepositoryForm.ABSENT)


def get_package_source(raw: Any) -> PackageSource:
    """Return the canonical (source_url, source_directory) for a repository field.

    GitHub URLs pointing inside a repository, e.g.
    ``https://github.com/owner/repo/tree/master/packages/sub``, are cut back to
    ``https://github.com/owner/repo`` and the trailing path becomes the
    directory unless one was given explicitly.
    """
    ref = raw if isinstance(raw, RepositoryRef) else parse_repository(raw)
    if ref.form is RepositoryForm.ABSENT:
        return PackageSource()

    source_url = ref.url
    source_directory = ref.directory
    if source_url:
        segments = source_url.split("/")
        # scheme:, '', host, owner, repo, tree, ref, path...
        if len(segments) > 7 and segments[2] == "github.com":
            source_url = "/".join(segments[:5])
            source_directory = source_directory or "/".join(segments[7:])
    return PackageSource(source_url=source_url, source_directory=source_directory)
