"""Data models for registry releases."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

import semantic_version

from ..constants import Constants
from ..errors import VersionParseError
from .semver import SemanticVersion, parse_version, precedence_hash, precedence_key

if TYPE_CHECKING:
    from .version_set import VersionSet


def _coerce(other: object) -> Optional[SemanticVersion]:
    """Return the version ``other`` stands for, or None if it has none."""
    if isinstance(other, Release):
        return other.version
    if isinstance(other, semantic_version.Version):
        return other
    if isinstance(other, str):
        try:
            return parse_version(other)
        except VersionParseError:
            return None
    return None


@dataclass(frozen=True, eq=False)
class Release:
    """One published version of a package.

    Releases compare by semantic version against other releases,
    ``SemanticVersion`` objects and version strings. Publish time is not part
    of the comparison; use ``published_at`` directly for time ordering.
    """

    version: SemanticVersion
    published_at: datetime
    yanked: bool = False

    @property
    def major(self) -> int:
        return self.version.major

    @property
    def minor(self) -> int:
        return self.version.minor

    @property
    def patch(self) -> int:
        return self.version.patch

    def _compare_key(self, other: object):
        version = _coerce(other)
        if version is None:
            return None
        return precedence_key(version)

    def __eq__(self, other: object) -> bool:
        key = self._compare_key(other)
        if key is None:
            return False if isinstance(other, str) else NotImplemented
        return precedence_key(self.version) == key

    def __lt__(self, other: object) -> bool:
        key = self._compare_key(other)
        if key is None:
            return NotImplemented
        return precedence_key(self.version) < key

    def __le__(self, other: object) -> bool:
        key = self._compare_key(other)
        if key is None:
            return NotImplemented
        return precedence_key(self.version) <= key

    def __gt__(self, other: object) -> bool:
        key = self._compare_key(other)
        if key is None:
            return NotImplemented
        return precedence_key(self.version) > key

    def __ge__(self, other: object) -> bool:
        key = self._compare_key(other)
        if key is None:
            return NotImplemented
        return precedence_key(self.version) >= key

    def __hash__(self) -> int:
        return precedence_hash(self.version)

    def __str__(self) -> str:
        if self.yanked:
            return f"{self.version}{Constants.YANKED_MARKER}"
        return str(self.version)


@dataclass(frozen=True)
class VersionSummary:
    """Two-field summary of a package: highest and most recently published.

    Superseded by VersionSet; kept for callers that only need these two values.
    """

    max_version: Optional[SemanticVersion]
    newest_version: Optional[SemanticVersion]

    @classmethod
    def from_version_set(cls, versions: "VersionSet") -> "VersionSummary":
        """Project a VersionSet onto its max and newest unyanked versions."""
        max_release = versions.max_unyanked_version()
        newest_release = versions.newest_unyanked_version()
        return cls(
            max_version=max_release.version if max_release else None,
            newest_version=newest_release.version if newest_release else None,
        )
