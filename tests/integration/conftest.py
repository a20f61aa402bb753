"""Fixtures for CLI workflow tests."""

import pytest
from click.testing import CliRunner

from grove.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def grove(runner, temp_dir, monkeypatch):
    """Run grove commands from inside temp_dir."""
    monkeypatch.chdir(temp_dir)

    def _run(*args):
        return runner.invoke(cli, list(args))

    return _run


@pytest.fixture
def write(temp_dir):
    """Write a file relative to temp_dir."""

    def _write(path, content):
        file_path = temp_dir / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path

    return _write
