"""
Tests for the command line interface.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from fcache import __version__
from fcache.cache.file_cache import FileCache
from fcache.cli.main import app

runner = CliRunner()


@pytest.fixture
def cli_env(cache_root: Path) -> dict[str, str]:
    return {"CACHE_DIR": str(cache_root), "CACHE_LIFE": "60", "LOG_LEVEL": "WARNING"}


class TestCli:
    """Test CLI commands against a temporary cache."""

    def test_set_then_get(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["set", "foo", '{"a": 1, "b": [1, 2, 3]}'], env=cli_env)
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["get", "foo"], env=cli_env)
        assert result.exit_code == 0, result.output
        assert '"a": 1' in result.output

    def test_get_miss_exits_nonzero(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["get", "missing"], env=cli_env)
        assert result.exit_code == 1

    def test_set_rejects_invalid_json(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["set", "foo", "{not json"], env=cli_env)
        assert result.exit_code == 2

    def test_delete(self, cli_env: dict[str, str], cache_root: Path) -> None:
        runner.invoke(app, ["set", "foo", "1"], env=cli_env)

        assert runner.invoke(app, ["delete", "foo"], env=cli_env).exit_code == 0
        assert runner.invoke(app, ["delete", "foo"], env=cli_env).exit_code == 1

    def test_path(self, cli_env: dict[str, str], cache_root: Path) -> None:
        result = runner.invoke(app, ["path", "foo"], env=cli_env)
        assert result.exit_code == 0
        assert "0beec7b5ea3f0fdbc95d0dd47f3c5bc275da8a33.txt" in result.output

    def test_values_are_shared_with_library(
        self, cli_env: dict[str, str], cache_root: Path
    ) -> None:
        runner.invoke(app, ["set", "shared", '["x"]'], env=cli_env)

        cache = FileCache(cache_root, default_ttl=60, default_extension=".py")
        assert cache.get("shared") == ["x"]

    def test_config(self, cli_env: dict[str, str]) -> None:
        result = runner.invoke(app, ["config"], env=cli_env)
        assert result.exit_code == 0
        assert "CACHE_LIFE" in result.output

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output
