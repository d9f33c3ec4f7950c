"""Caller configuration for version checks.

A host program builds one ``CheckConfig`` at startup. Any field left unset is
filled in by ``resolve()``: name and version from the installed distribution's
metadata, the User-Agent from those two, and the registry URL and timeout
from the environment or the package defaults.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from importlib import metadata
from typing import Optional

from .checks import (
    async_get_max_minor_version,
    async_get_max_patch,
    async_get_max_version,
    async_get_newest_version,
    get_max_minor_version,
    get_max_patch,
    get_max_version,
    get_newest_version,
)
from .constants import Constants
from .errors import InputError
from .registry.crates import (
    AiohttpTransport,
    RequestsTransport,
    async_get_versions,
    get_versions,
)
from .versioning.models import Release
from .versioning.version_set import VersionSet

logger = logging.getLogger(__name__)


def default_user_agent(package_name: str, version: str) -> str:
    """Return the ``name/version`` User-Agent crates.io asks clients to send."""
    return f"{package_name}/{version}"


def _default_registry_url() -> str:
    return os.environ.get(Constants.ENV_REGISTRY_URL, "") or Constants.REGISTRY_URL_CRATES


def _default_timeout() -> float:
    raw = os.environ.get(Constants.ENV_TIMEOUT, "")
    if not raw:
        return float(Constants.REQUEST_TIMEOUT)
    try:
        value = float(raw)
    except ValueError as exc:
        raise InputError(f"{Constants.ENV_TIMEOUT} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise InputError(f"{Constants.ENV_TIMEOUT} must be positive, got {raw!r}")
    return value


def _distribution_metadata(distribution: str):
    try:
        return metadata.metadata(distribution)
    except metadata.PackageNotFoundError as exc:
        raise InputError(
            f"Distribution {distribution!r} is not installed; pass package_name and current_version"
        ) from exc


@dataclass(frozen=True)
class CheckConfig:
    """Parameters for a version check; every field is optional.

    Attributes:
        package_name: Registry name of the package; defaults to the distribution's Name.
        current_version: Version to compare against; defaults to the distribution's Version.
        user_agent: Defaults to ``"{package_name}/{current_version}"``.
        distribution: Installed distribution to read defaults from; defaults to package_name.
        registry_url: Base of the crates API.
        timeout: Request timeout in seconds.
    """

    package_name: Optional[str] = None
    current_version: Optional[str] = None
    user_agent: Optional[str] = None
    distribution: Optional[str] = None
    registry_url: Optional[str] = None
    timeout: Optional[float] = None

    def resolve(self) -> "CheckConfig":
        """Return a copy with every field populated."""
        package_name = self.package_name
        current_version = self.current_version
        if package_name is None or current_version is None:
            distribution = self.distribution or package_name
            if not distribution:
                raise InputError("Either package_name or distribution must be given")
            meta = _distribution_metadata(distribution)
            package_name = package_name or meta["Name"]
            current_version = current_version or meta["Version"]
            logger.debug("Resolved %s %s from distribution metadata", package_name, current_version)

        return replace(
            self,
            package_name=package_name,
            current_version=current_version,
            user_agent=self.user_agent or default_user_agent(package_name, current_version),
            registry_url=self.registry_url or _default_registry_url(),
            timeout=self.timeout if self.timeout is not None else _default_timeout(),
        )

    def _blocking(self):
        cfg = self.resolve()
        return cfg, {
            "transport": RequestsTransport(timeout=cfg.timeout),
            "registry_url": cfg.registry_url,
        }

    def _async(self):
        cfg = self.resolve()
        return cfg, {
            "transport": AiohttpTransport(timeout=cfg.timeout),
            "registry_url": cfg.registry_url,
        }

    def versions(self) -> VersionSet:
        cfg, kwargs = self._blocking()
        return get_versions(cfg.package_name, cfg.user_agent, **kwargs)

    def max_version(self) -> Optional[Release]:
        cfg, kwargs = self._blocking()
        return get_max_version(cfg.package_name, cfg.current_version, cfg.user_agent, **kwargs)

    def max_minor_version(self) -> Optional[Release]:
        cfg, kwargs = self._blocking()
        return get_max_minor_version(cfg.package_name, cfg.current_version, cfg.user_agent, **kwargs)

    def max_patch(self) -> Optional[Release]:
        cfg, kwargs = self._blocking()
        return get_max_patch(cfg.package_name, cfg.current_version, cfg.user_agent, **kwargs)

    def newest_version(self) -> Optional[Release]:
        cfg, kwargs = self._blocking()
        return get_newest_version(cfg.package_name, cfg.current_version, cfg.user_agent, **kwargs)

    async def async_versions(self) -> VersionSet:
        cfg, kwargs = self._async()
        return await async_get_versions(cfg.package_name, cfg.user_agent, **kwargs)

    async def async_max_version(self) -> Optional[Release]:
        cfg, kwargs = self._async()
        return await async_get_max_version(
            cfg.package_name, cfg.current_version, cfg.user_agent, **kwargs
        )

    async def async_max_minor_version(self) -> Optional[Release]:
        cfg, kwargs = self._async()
        return await async_get_max_minor_version(
            cfg.package_name, cfg.current_version, cfg.user_agent, **kwargs
        )

    async def async_max_patch(self) -> Optional[Release]:
        cfg, kwargs = self._async()
        return await async_get_max_patch(
            cfg.package_name, cfg.current_version, cfg.user_agent, **kwargs
        )

    async def async_newest_version(self) -> Optional[Release]:
        cfg, kwargs = self._async()
        return await async_get_newest_version(
            cfg.package_name, cfg.current_version, cfg.user_agent, **kwargs
        )
