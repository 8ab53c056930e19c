"""Shared fixtures for the prompt extractor tests."""

import sys
from pathlib import Path

import pytest

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from prompt_extract.settings import Settings


@pytest.fixture
def settings():
    """Default settings, independent of any global instance."""
    return Settings()
