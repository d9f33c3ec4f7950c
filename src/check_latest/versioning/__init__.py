"""Version model and query engine."""

from .models import Release, VersionSummary
from .semver import SemanticVersion, parse_version, precedence_key
from .version_set import VersionSet

__all__ = [
    "Release",
    "SemanticVersion",
    "VersionSet",
    "VersionSummary",
    "parse_version",
    "precedence_key",
]
