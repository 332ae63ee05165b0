"""
Shared fixtures for the mercator-image test suite.
"""
from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config loader at a per-test path that does not exist yet."""
    path = tmp_path / "mercator_image.json"
    monkeypatch.setenv("MERCATOR_IMAGE_CONFIG", str(path))
    return path
