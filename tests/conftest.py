"""Shared test fixtures for buildforge tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Generator[Path, None, None]:
    """Create an empty working directory and chdir into it for the test."""
    original_cwd = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)


@pytest.fixture
def state_dir(workspace: Path) -> Path:
    """Create the .buildforge directory inside the workspace."""
    d = workspace / ".buildforge"
    d.mkdir()
    return d


@pytest.fixture
def registry_document() -> str:
    """Return a registry document with two builds."""
    return """{
  "godot-4.2.1-steam": {
    "version": "4.2.1-stable",
    "name": "steam",
    "created": "2026-01-04T12:00:00"
  },
  "godot-4.3-mobile": {
    "version": "4.3-stable",
    "name": "mobile",
    "created": "2026-02-10T09:30:00"
  }
}
"""
