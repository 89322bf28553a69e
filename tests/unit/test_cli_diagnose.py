"""Tests for the diagnostic CLI."""

import httpx
import pytest
from unittest.mock import patch

from regskin.cli_diagnose import cmd_health, cmd_image, cmd_tags, cmd_tree, main
from regskin.config import Settings
from regskin.registry.exceptions import RegistryConnectionError
from regskin.registry.models import ImageMetadata, TagList
from tests.fixtures.sample_data import REGISTRY_CATALOG, REGISTRY_URL


@pytest.fixture
def settings():
    return Settings(registry_url=REGISTRY_URL)


@pytest.fixture
def mock_registry_cls():
    with patch("regskin.cli_diagnose.Registry") as registry_cls:
        yield registry_cls


def registry_instance(registry_cls):
    return registry_cls.return_value.__enter__.return_value


class TestHealth:
    @pytest.mark.parametrize("status,code", [(200, 0), (401, 0), (500, 1)])
    def test_health_status(self, settings, status, code):
        """Test health exit code per registry status."""
        with patch("regskin.cli_diagnose.httpx.get") as mock_get:
            mock_get.return_value.status_code = status
            assert cmd_health(settings) == code

    def test_health_unreachable(self, settings, capsys):
        """Test health check against an unreachable registry."""
        with patch(
            "regskin.cli_diagnose.httpx.get", side_effect=httpx.ConnectError("refused")
        ):
            assert cmd_health(settings) == 1
        assert "UNREACHABLE" in capsys.readouterr().out


class TestTree:
    def test_tree(self, settings, mock_registry_cls, capsys):
        """Test printing a catalog subtree."""
        registry_instance(mock_registry_cls).fetch_catalog.return_value = REGISTRY_CATALOG[
            "repositories"
        ]

        assert cmd_tree(settings, "team") == 0

        out = capsys.readouterr().out
        assert "app" in out
        assert "    lint" in out
        assert "alpine" not in out

    def test_tree_unknown_path(self, settings, mock_registry_cls):
        """Test tree for a path outside the catalog."""
        registry_instance(mock_registry_cls).fetch_catalog.return_value = ["team/app"]
        assert cmd_tree(settings, "nope") == 1

    def test_tree_registry_error(self, settings, mock_registry_cls):
        """Test tree when the catalog fetch fails."""
        registry_instance(mock_registry_cls).fetch_catalog.side_effect = (
            RegistryConnectionError("down")
        )
        assert cmd_tree(settings) == 1


class TestTagsAndImage:
    def test_tags(self, settings, mock_registry_cls, capsys):
        """Test listing repository tags."""
        instance = registry_instance(mock_registry_cls)
        instance.fetch_catalog.return_value = ["team/app"]
        instance.fetch_tags.return_value = TagList(name="team/app", tags=["v2", "v1"])

        assert cmd_tags(settings, "team/app") == 0
        assert capsys.readouterr().out.split() == ["v2", "v1"]

    def test_no_tags(self, settings, mock_registry_cls):
        """Test tags for a repository without tags."""
        instance = registry_instance(mock_registry_cls)
        instance.fetch_catalog.return_value = []
        instance.fetch_tags.return_value = TagList()

        assert cmd_tags(settings, "team/app") == 1

    def test_image(self, settings, mock_registry_cls, capsys):
        """Test printing image metadata."""
        registry_instance(mock_registry_cls).fetch_manifest.return_value = ImageMetadata(
            path="team/app",
            tag="1.0",
            architecture="amd64",
            os="linux",
            created="2024-03-01",
            labels={"maintainer": "team"},
        )

        assert cmd_image(settings, "team/app", "1.0") == 0
        out = capsys.readouterr().out
        assert "linux/amd64" in out
        assert "maintainer=team" in out


class TestMain:
    def test_no_command(self):
        """Test running without a subcommand."""
        assert main([]) == 1

    def test_missing_configuration(self, monkeypatch):
        """Test missing registry URL exits with status 2."""
        monkeypatch.delenv("REGSKIN_REGISTRY_URL", raising=False)
        assert main(["health"]) == 2
