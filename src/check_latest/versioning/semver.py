"""Semantic version parsing.

``SemanticVersion`` is a ``semantic_version.Version`` whose equality and hash
follow SemVer 2.0.0 precedence, so build metadata never distinguishes two
versions and ``==``, ``<`` and ``<=`` agree with each other.
"""
from __future__ import annotations

from typing import Union

import semantic_version

from ..errors import VersionParseError


class SemanticVersion(semantic_version.Version):
    """Immutable semantic version; ``1.0.0+a == 1.0.0+b``."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, semantic_version.Version):
            return NotImplemented
        return self.precedence_key == other.precedence_key

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, semantic_version.Version):
            return NotImplemented
        return self.precedence_key != other.precedence_key

    def __hash__(self) -> int:
        return precedence_hash(self)


def precedence_key(version: semantic_version.Version) -> tuple:
    """Sort key for SemVer precedence; build metadata is not part of it."""
    return version.precedence_key


def precedence_hash(version: semantic_version.Version) -> int:
    """Hash consistent with precedence equality."""
    # The identifier objects inside precedence_key are not hashable
    return hash((version.major, version.minor, version.patch, tuple(version.prerelease or ())))


def parse_version(text: Union[str, semantic_version.Version]) -> SemanticVersion:
    """Parse ``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]`` into a SemanticVersion.

    Args:
        text: Version string or parsed version. A SemanticVersion is returned
            as is; a plain ``semantic_version.Version`` is converted.

    Returns:
        SemanticVersion: The parsed version.

    Raises:
        VersionParseError: If ``text`` is not a complete, well-formed version.
    """
    if isinstance(text, SemanticVersion):
        return text
    if isinstance(text, semantic_version.Version):
        text = str(text)
    if not isinstance(text, str):
        raise VersionParseError(text, "expected a string")
    try:
        return SemanticVersion(text.strip())
    except ValueError as exc:
        raise VersionParseError(text, str(exc)) from exc
