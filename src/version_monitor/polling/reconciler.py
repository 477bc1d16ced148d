"""
Release reconciliation.

Computes which fetched releases are not yet known. Versions are compared as
opaque strings.
"""

from collections.abc import Iterable

from ..models import Release


def diff(
    known_releases: Iterable[Release], fetched_releases: Iterable[Release]
) -> list[Release]:
    """
    Get the fetched releases whose version is not already known.

    The result keeps the order of ``fetched_releases`` and reports each
    version at most once, even if the host lists it repeatedly.

    Args:
        known_releases: Releases already recorded for the project
        fetched_releases: Releases just read from the host

    Returns:
        New releases in fetched order
    """
    seen = {release.version for release in known_releases}
    new_releases = []

    for release in fetched_releases:
        if release.version in seen:
            continue
        seen.add(release.version)
        new_releases.append(release)

    return new_releases
