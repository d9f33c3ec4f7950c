"""Tests for CheckConfig default resolution and delegation."""

import asyncio
from unittest.mock import patch

import pytest

from check_latest.config import CheckConfig, default_user_agent
from check_latest.errors import InputError
from check_latest.registry.crates import AiohttpTransport, RequestsTransport
from conftest import make_release


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("CHECK_LATEST_REGISTRY_URL", raising=False)
    monkeypatch.delenv("CHECK_LATEST_TIMEOUT", raising=False)


def test_default_user_agent():
    assert default_user_agent("my-tool", "1.2.3") == "my-tool/1.2.3"


class TestResolve:
    """Default resolution."""

    def test_explicit_values_kept(self):
        cfg = CheckConfig(package_name="tool", current_version="1.0.0", user_agent="custom").resolve()
        assert cfg.package_name == "tool"
        assert cfg.current_version == "1.0.0"
        assert cfg.user_agent == "custom"
        assert cfg.registry_url == "https://crates.io/api/v1/crates/"
        assert cfg.timeout == 30.0

    def test_user_agent_derived(self):
        cfg = CheckConfig(package_name="tool", current_version="1.0.0").resolve()
        assert cfg.user_agent == "tool/1.0.0"

    @patch("check_latest.config.metadata.metadata")
    def test_defaults_from_distribution(self, mock_metadata):
        mock_metadata.return_value = {"Name": "my-dist", "Version": "0.4.0"}
        cfg = CheckConfig(distribution="my-dist").resolve()
        mock_metadata.assert_called_once_with("my-dist")
        assert cfg.package_name == "my-dist"
        assert cfg.current_version == "0.4.0"
        assert cfg.user_agent == "my-dist/0.4.0"

    @patch("check_latest.config.metadata.metadata")
    def test_package_name_used_as_distribution(self, mock_metadata):
        mock_metadata.return_value = {"Name": "other", "Version": "2.0.0"}
        cfg = CheckConfig(package_name="crate-name").resolve()
        mock_metadata.assert_called_once_with("crate-name")
        assert cfg.package_name == "crate-name"
        assert cfg.current_version == "2.0.0"

    def test_uninstalled_distribution(self):
        with pytest.raises(InputError):
            CheckConfig(distribution="surely-not-installed-dist-xyz").resolve()

    def test_nothing_given(self):
        with pytest.raises(InputError):
            CheckConfig().resolve()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CHECK_LATEST_REGISTRY_URL", "http://mirror.local/crates/")
        monkeypatch.setenv("CHECK_LATEST_TIMEOUT", "4.5")
        cfg = CheckConfig(package_name="t", current_version="1.0.0").resolve()
        assert cfg.registry_url == "http://mirror.local/crates/"
        assert cfg.timeout == 4.5

    @pytest.mark.parametrize("value", ["soon", "0", "-1"])
    def test_bad_timeout_env(self, monkeypatch, value):
        monkeypatch.setenv("CHECK_LATEST_TIMEOUT", value)
        with pytest.raises(InputError):
            CheckConfig(package_name="t", current_version="1.0.0").resolve()

    def test_resolve_does_not_mutate(self):
        cfg = CheckConfig(package_name="t", current_version="1.0.0")
        cfg.resolve()
        assert cfg.user_agent is None


class TestDelegation:
    """Config methods call the core with resolved values."""

    @patch("check_latest.config.get_max_version")
    def test_max_version(self, mock_check):
        mock_check.return_value = make_release("2.0.0")
        result = CheckConfig(package_name="t", current_version="1.0.0", timeout=3).max_version()
        assert str(result) == "2.0.0"
        args, kwargs = mock_check.call_args
        assert args == ("t", "1.0.0", "t/1.0.0")
        assert isinstance(kwargs["transport"], RequestsTransport)
        assert kwargs["transport"].timeout == 3
        assert kwargs["registry_url"] == "https://crates.io/api/v1/crates/"

    @patch("check_latest.config.get_max_minor_version")
    @patch("check_latest.config.get_max_patch")
    @patch("check_latest.config.get_newest_version")
    @patch("check_latest.config.get_versions")
    def test_other_blocking_methods(self, mock_versions, mock_newest, mock_patch, mock_minor):
        cfg = CheckConfig(package_name="t", current_version="1.0.0", user_agent="ua")
        cfg.versions()
        cfg.newest_version()
        cfg.max_patch()
        cfg.max_minor_version()
        assert mock_versions.call_args[0] == ("t", "ua")
        for mock_check in (mock_newest, mock_patch, mock_minor):
            assert mock_check.call_args[0] == ("t", "1.0.0", "ua")

    @patch("check_latest.config.async_get_max_version")
    @patch("check_latest.config.async_get_versions")
    def test_async_methods(self, mock_versions, mock_check):
        # patch() substitutes AsyncMock for coroutine functions
        mock_versions.return_value = "versions"
        mock_check.return_value = make_release("1.1.0")
        cfg = CheckConfig(package_name="t", current_version="1.0.0")

        assert asyncio.run(cfg.async_versions()) == "versions"
        assert str(asyncio.run(cfg.async_max_version())) == "1.1.0"
        assert isinstance(mock_check.call_args[1]["transport"], AiohttpTransport)

    @patch("check_latest.config.async_get_max_minor_version")
    @patch("check_latest.config.async_get_max_patch")
    @patch("check_latest.config.async_get_newest_version")
    def test_other_async_methods(self, mock_newest, mock_patch, mock_minor):
        for mock_check in (mock_newest, mock_patch, mock_minor):
            mock_check.return_value = None
        cfg = CheckConfig(package_name="t", current_version="1.0.0")

        async def _run():
            return (
                await cfg.async_newest_version(),
                await cfg.async_max_patch(),
                await cfg.async_max_minor_version(),
            )

        assert asyncio.run(_run()) == (None, None, None)
