"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-process HTTP API)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings():
    """Settings isolated from the developer's .env file."""
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        gemini_model="gemini-test",
        local_model="phi3:mini",
    )


@pytest.fixture
def sample_source_text():
    """Source text long enough for text mode."""
    return (
        "Hypertension is a chronic condition in which blood pressure in the arteries is "
        "persistently elevated. First-line treatments include thiazide diuretics, ACE "
        "inhibitors and calcium channel blockers, combined with lifestyle changes."
    )


@pytest.fixture
def sample_pairs():
    """A well-formed batch as a model would return it."""
    return [
        {
            "question": "What is hypertension?",
            "answer": "A chronic condition with persistently elevated arterial blood pressure.",
            "difficulty": "basic",
        },
        {
            "question": "Which drug classes are first-line treatments?",
            "answer": "Thiazide diuretics, ACE inhibitors and calcium channel blockers.",
            "difficulty": "intermediate",
        },
        {
            "question": "What accompanies drug therapy?",
            "answer": "Lifestyle changes.",
            "difficulty": "advanced",
        },
    ]


@pytest.fixture
def cloud_response(sample_pairs):
    """Gemini generateContent response body carrying the sample batch."""
    return {
        "candidates": [
            {"content": {"parts": [{"text": json.dumps(sample_pairs)}], "role": "model"}}
        ]
    }


@pytest.fixture
def local_response(sample_pairs):
    """Ollama /api/generate response body carrying the sample batch."""
    return {"model": "phi3:mini", "response": json.dumps(sample_pairs), "done": True}
