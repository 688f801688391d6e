"""Shared pytest fixtures for hulud-scanner tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


def _write_manifest(directory: Path, data: dict | str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


@pytest.fixture
def write_manifest():
    """Return a helper that writes ``<directory>/package.json``."""
    return _write_manifest


@pytest.fixture
def compromised_csv(tmp_path: Path) -> Path:
    path = tmp_path / "compromised.csv"
    path.write_text(
        "package_name,version_range\n"
        "evil-pkg,1.0.0-1.2.0\n"
        "@scope/bad,0.1.1\n"
    )
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty project directory with a node_modules folder."""
    root = tmp_path / "project"
    (root / "node_modules").mkdir(parents=True)
    return root
