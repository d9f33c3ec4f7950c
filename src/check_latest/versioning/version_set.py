"""In-memory query engine over a package's published releases.

Every query filters the release list (by yanked state and optionally by
major/minor) and then selects a maximum, either by semantic version or by
publish time. The two orders are independent: an older major line can get a
patch published after a newer line's first release, so ``max_*`` and
``newest_*`` answers must not be assumed to agree.

Ties resolve to the first maximal release in list order.
"""
from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from ..errors import VersionSetConsumedError
from .models import Release
from .semver import precedence_key

Predicate = Callable[[Release], bool]


def _by_version(release: Release):
    return precedence_key(release.version)


def _by_publish_time(release: Release):
    return release.published_at


def _yanked_filter(yanked: Optional[bool]) -> Predicate:
    if yanked is None:
        return lambda release: True
    return lambda release: bool(release.yanked) == yanked


class VersionSet:
    """The releases of one package plus read-only queries over them.

    ``releases`` may be appended to or replaced between queries. The
    ``*_owned`` variants return their answer and consume the set; any later
    use raises VersionSetConsumedError.
    """

    def __init__(self, releases: Optional[Iterable[Release]] = None):
        self._releases: Optional[List[Release]] = list(releases or [])

    @property
    def releases(self) -> List[Release]:
        """The underlying, mutable release list."""
        return self._live()

    @releases.setter
    def releases(self, value: Iterable[Release]) -> None:
        self._live()
        self._releases = list(value)

    @property
    def consumed(self) -> bool:
        return self._releases is None

    def __len__(self) -> int:
        return len(self._live())

    def __iter__(self):
        return iter(self._live())

    def __repr__(self) -> str:
        if self._releases is None:
            return "VersionSet(<consumed>)"
        return f"VersionSet({len(self._releases)} releases)"

    def _live(self) -> List[Release]:
        if self._releases is None:
            raise VersionSetConsumedError("VersionSet was consumed by an owned query")
        return self._releases

    def _consume(self) -> List[Release]:
        releases = self._live()
        self._releases = None
        return releases

    @staticmethod
    def _select(releases: List[Release], predicate: Predicate, key) -> Optional[Release]:
        # max() keeps the first maximal element, which makes ties deterministic
        return max(filter(predicate, releases), key=key, default=None)

    # Generic selectors

    def max_version_for(
        self,
        major: Optional[int] = None,
        minor: Optional[int] = None,
        *,
        yanked: Optional[bool] = None,
    ) -> Optional[Release]:
        """Highest release by semantic version matching the constraints.

        Args:
            major: Only consider releases with this major version.
            minor: Only consider releases with this minor version; requires ``major``.
            yanked: None for all releases, False for unyanked only, True for yanked only.

        Returns:
            Optional[Release]: A maximal release, or None when nothing matches.
        """
        return self._select(self._live(), self._predicate(major, minor, yanked), _by_version)

    def newest_version_for(self, *, yanked: Optional[bool] = None) -> Optional[Release]:
        """Most recently published release, optionally filtered by yanked state."""
        return self._select(self._live(), _yanked_filter(yanked), _by_publish_time)

    @staticmethod
    def _predicate(major: Optional[int], minor: Optional[int], yanked: Optional[bool]) -> Predicate:
        if minor is not None and major is None:
            raise ValueError("minor constraint requires a major constraint")
        by_yanked = _yanked_filter(yanked)

        def predicate(release: Release) -> bool:
            if not by_yanked(release):
                return False
            if major is not None and release.major != major:
                return False
            if minor is not None and release.minor != minor:
                return False
            return True

        return predicate

    # Max by semantic version

    def max_version(self) -> Optional[Release]:
        return self.max_version_for()

    def max_unyanked_version(self) -> Optional[Release]:
        return self.max_version_for(yanked=False)

    def max_yanked_version(self) -> Optional[Release]:
        return self.max_version_for(yanked=True)

    def max_minor_version(self, major: int) -> Optional[Release]:
        """Highest release within ``major``, i.e. ``major.0.0 <= v < major+1.0.0``."""
        return self.max_version_for(major)

    def max_unyanked_minor_version(self, major: int) -> Optional[Release]:
        return self.max_version_for(major, yanked=False)

    def max_yanked_minor_version(self, major: int) -> Optional[Release]:
        return self.max_version_for(major, yanked=True)

    def max_patch(self, major: int, minor: int) -> Optional[Release]:
        """Highest release within ``major.minor``."""
        return self.max_version_for(major, minor)

    def max_unyanked_patch(self, major: int, minor: int) -> Optional[Release]:
        return self.max_version_for(major, minor, yanked=False)

    def max_yanked_patch(self, major: int, minor: int) -> Optional[Release]:
        return self.max_version_for(major, minor, yanked=True)

    # Max by publish time

    def newest_version(self) -> Optional[Release]:
        return self.newest_version_for()

    def newest_unyanked_version(self) -> Optional[Release]:
        return self.newest_version_for(yanked=False)

    def newest_yanked_version(self) -> Optional[Release]:
        return self.newest_version_for(yanked=True)

    # Owned variants

    def _take_max(self, major=None, minor=None, yanked=None) -> Optional[Release]:
        predicate = self._predicate(major, minor, yanked)
        return self._select(self._consume(), predicate, _by_version)

    def _take_newest(self, yanked=None) -> Optional[Release]:
        return self._select(self._consume(), _yanked_filter(yanked), _by_publish_time)

    def max_version_owned(self) -> Optional[Release]:
        return self._take_max()

    def max_unyanked_version_owned(self) -> Optional[Release]:
        return self._take_max(yanked=False)

    def max_yanked_version_owned(self) -> Optional[Release]:
        return self._take_max(yanked=True)

    def max_minor_version_owned(self, major: int) -> Optional[Release]:
        return self._take_max(major)

    def max_unyanked_minor_version_owned(self, major: int) -> Optional[Release]:
        return self._take_max(major, yanked=False)

    def max_yanked_minor_version_owned(self, major: int) -> Optional[Release]:
        return self._take_max(major, yanked=True)

    def max_patch_owned(self, major: int, minor: int) -> Optional[Release]:
        return self._take_max(major, minor)

    def max_unyanked_patch_owned(self, major: int, minor: int) -> Optional[Release]:
        return self._take_max(major, minor, yanked=False)

    def max_yanked_patch_owned(self, major: int, minor: int) -> Optional[Release]:
        return self._take_max(major, minor, yanked=True)

    def newest_version_owned(self) -> Optional[Release]:
        return self._take_newest()

    def newest_unyanked_version_owned(self) -> Optional[Release]:
        return self._take_newest(yanked=False)

    def newest_yanked_version_owned(self) -> Optional[Release]:
        return self._take_newest(yanked=True)

    def releases_owned(self) -> List[Release]:
        """Hand over the release list and consume the set."""
        return self._consume()
