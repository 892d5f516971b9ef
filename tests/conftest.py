"""Pytest configuration and shared fixtures."""
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def templates_dir() -> Path:
    """Directory holding the sample Doxyfile template and config."""
    return REPO_ROOT / "templates"
