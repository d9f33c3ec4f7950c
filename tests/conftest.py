"""Shared fixtures and helpers for the check_latest test suite."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from check_latest.versioning import Release, VersionSet, parse_version

EPOCH = datetime(2020, 1, 1, tzinfo=timezone.utc)


def make_release(num: str, yanked: bool = False, day: int = 0) -> Release:
    """Build a Release published ``day`` days after EPOCH."""
    return Release(
        version=parse_version(num),
        published_at=EPOCH + timedelta(days=day),
        yanked=yanked,
    )


def crate_document(
    versions: List[Dict[str, Any]],
    max_version: Optional[str] = None,
    newest_version: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a crates.io style crate document."""
    return {
        "crate": {
            "max_version": max_version or (versions[0]["num"] if versions else "0.0.0"),
            "newest_version": newest_version or (versions[0]["num"] if versions else "0.0.0"),
        },
        "versions": versions,
    }


def version_entry(num: str, yanked: bool = False, day: int = 0) -> Dict[str, Any]:
    """Build one entry of the ``versions`` array."""
    created = EPOCH + timedelta(days=day)
    return {
        "num": num,
        "yanked": yanked,
        "created_at": created.strftime("%Y-%m-%dT%H:%M:%S.%f+00:00"),
    }


class FakeTransport:
    """Blocking transport returning a canned body and recording requests."""

    def __init__(self, body: str):
        self.body = body
        self.calls: List[tuple] = []

    def fetch(self, url: str, user_agent: str) -> str:
        self.calls.append((url, user_agent))
        return self.body


class FakeAsyncTransport:
    """Awaitable transport returning a canned body and recording requests."""

    def __init__(self, body: str):
        self.body = body
        self.calls: List[tuple] = []

    async def fetch(self, url: str, user_agent: str) -> str:
        self.calls.append((url, user_agent))
        return self.body


def transport_for(versions: List[Dict[str, Any]], **kwargs: Any) -> FakeTransport:
    return FakeTransport(json.dumps(crate_document(versions, **kwargs)))


def async_transport_for(versions: List[Dict[str, Any]], **kwargs: Any) -> FakeAsyncTransport:
    return FakeAsyncTransport(json.dumps(crate_document(versions, **kwargs)))


@pytest.fixture
def mixed_set() -> VersionSet:
    """Releases across two major lines with yanked entries and out-of-order publish times."""
    return VersionSet([
        make_release("1.0.0", day=0),
        make_release("1.1.0", day=10),
        make_release("1.1.1", yanked=True, day=20),
        make_release("2.0.0", day=30),
        make_release("2.1.0-beta.1", day=35),
        make_release("2.1.0", yanked=True, day=40),
        make_release("1.1.2", day=50),
    ])
