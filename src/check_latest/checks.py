"""Compare a program's own version against what the registry has published.

Each check parses the caller's current version first, fetches the release
list, runs one unyanked query and returns the candidate only when it is
strictly greater than the current version::

    newer = get_max_version("my-tool", "1.0.0", "my-tool/1.0.0")
    if newer is not None:
        print(f"Version {newer.version} is available")

Yanked releases are never offered as upgrades.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from .errors import InputError, VersionParseError
from .registry.crates import AsyncTransport, Transport, async_get_versions, get_versions
from .versioning.models import Release
from .versioning.semver import SemanticVersion, parse_version
from .versioning.version_set import VersionSet

logger = logging.getLogger(__name__)

VersionLike = Union[str, SemanticVersion]
Query = Callable[[VersionSet, SemanticVersion], Optional[Release]]


def _parse_current(current_version: VersionLike) -> SemanticVersion:
    try:
        return parse_version(current_version)
    except VersionParseError as exc:
        raise InputError(f"Couldn't parse current version {current_version!r}") from exc


def _newer(candidate: Optional[Release], current: SemanticVersion) -> Optional[Release]:
    if candidate is not None and candidate > current:
        return candidate
    return None


def _max_query(versions: VersionSet, current: SemanticVersion) -> Optional[Release]:
    return versions.max_unyanked_version_owned()


def _minor_query(versions: VersionSet, current: SemanticVersion) -> Optional[Release]:
    return versions.max_unyanked_minor_version_owned(current.major)


def _patch_query(versions: VersionSet, current: SemanticVersion) -> Optional[Release]:
    return versions.max_unyanked_patch_owned(current.major, current.minor)


def _newest_query(versions: VersionSet, current: SemanticVersion) -> Optional[Release]:
    return versions.newest_unyanked_version_owned()


def _check(query: Query, package_name, current_version, user_agent, **kwargs) -> Optional[Release]:
    current = _parse_current(current_version)
    versions = get_versions(package_name, user_agent, **kwargs)
    result = _newer(query(versions, current), current)
    logger.debug(
        "%s %s: %s",
        package_name,
        current,
        f"newer release {result.version}" if result else "up to date",
    )
    return result


async def _async_check(query: Query, package_name, current_version, user_agent, **kwargs) -> Optional[Release]:
    current = _parse_current(current_version)
    versions = await async_get_versions(package_name, user_agent, **kwargs)
    result = _newer(query(versions, current), current)
    logger.debug(
        "%s %s: %s",
        package_name,
        current,
        f"newer release {result.version}" if result else "up to date",
    )
    return result


def get_max_version(
    package_name: str,
    current_version: VersionLike,
    user_agent: str,
    *,
    transport: Optional[Transport] = None,
    registry_url: Optional[str] = None,
) -> Optional[Release]:
    """Return the highest unyanked release if it is newer than ``current_version``.

    Returns:
        Optional[Release]: The newer release, or None when already up to date.

    Raises:
        InputError: ``current_version`` is not a valid semantic version.
        TransportError: The registry could not be reached.
        DecodeError: The registry response could not be decoded.
    """
    return _check(
        _max_query, package_name, current_version, user_agent,
        transport=transport, registry_url=registry_url,
    )


def get_max_minor_version(
    package_name: str,
    current_version: VersionLike,
    user_agent: str,
    *,
    transport: Optional[Transport] = None,
    registry_url: Optional[str] = None,
) -> Optional[Release]:
    """Like get_max_version, restricted to the current major version line."""
    return _check(
        _minor_query, package_name, current_version, user_agent,
        transport=transport, registry_url=registry_url,
    )


def get_max_patch(
    package_name: str,
    current_version: VersionLike,
    user_agent: str,
    *,
    transport: Optional[Transport] = None,
    registry_url: Optional[str] = None,
) -> Optional[Release]:
    """Like get_max_version, restricted to the current major.minor line."""
    return _check(
        _patch_query, package_name, current_version, user_agent,
        transport=transport, registry_url=registry_url,
    )


def get_newest_version(
    package_name: str,
    current_version: VersionLike,
    user_agent: str,
    *,
    transport: Optional[Transport] = None,
    registry_url: Optional[str] = None,
) -> Optional[Release]:
    """Return the most recently published unyanked release if it is newer.

    The most recent upload may be a patch to an older line, in which case
    it is not greater than ``current_version`` and None is returned.
    """
    return _check(
        _newest_query, package_name, current_version, user_agent,
        transport=transport, registry_url=registry_url,
    )


async def async_get_max_version(
    package_name: str,
    current_version: VersionLike,
    user_agent: str,
    *,
    transport: Optional[AsyncTransport] = None,
    registry_url: Optional[str] = None,
) -> Optional[Release]:
    """Awaitable form of get_max_version."""
    return await _async_check(
        _max_query, package_name, current_version, user_agent,
        transport=transport, registry_url=registry_url,
    )


async def async_get_max_minor_version(
    package_name: str,
    current_version: VersionLike,
    user_agent: str,
    *,
    transport: Optional[AsyncTransport] = None,
    registry_url: Optional[str] = None,
) -> Optional[Release]:
    """Awaitable form of get_max_minor_version."""
    return await _async_check(
        _minor_query, package_name, current_version, user_agent,
        transport=transport, registry_url=registry_url,
    )


async def async_get_max_patch(
    package_name: str,
    current_version: VersionLike,
    user_agent: str,
    *,
    transport: Optional[AsyncTransport] = None,
    registry_url: Optional[str] = None,
) -> Optional[Release]:
    """Awaitable form of get_max_patch."""
    return await _async_check(
        _patch_query, package_name, current_version, user_agent,
        transport=transport, registry_url=registry_url,
    )


async def async_get_newest_version(
    package_name: str,
    current_version: VersionLike,
    user_agent: str,
    *,
    transport: Optional[AsyncTransport] = None,
    registry_url: Optional[str] = None,
) -> Optional[Release]:
    """Awaitable form of get_newest_version."""
    return await _async_check(
        _newest_query, package_name, current_version, user_agent,
        transport=transport, registry_url=registry_url,
    )
