"""
Shared fixtures for all tests.

The upstream model is never called: tests inject a fake client whose
`chat.completions.create` returns an OpenAI-shaped object.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app import create_app
from config import Settings


FOUR_SECTION_REPLY = """Summary:
Influenza (flu) is a contagious respiratory illness caused by influenza viruses.

Symptoms:
- Fever or feeling feverish
- Cough
- Sore throat

Remedies:
- Rest as much as possible
- Drink plenty of fluids
- Take paracetamol for aches

Precautions:
- Wash your hands often
- Avoid close contact with sick people
- See a doctor if breathing becomes difficult
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def completion(content):
    """OpenAI-shaped chat completion with a single choice."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def fake_client(response=None, error=None):
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        client.chat.completions.create.return_value = response
    return client


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings():
    return Settings(_env_file=None, together_api_key="test-key")


@pytest.fixture
def four_section_reply():
    return FOUR_SECTION_REPLY


@pytest.fixture
def make_client_app(settings):
    """Build a Flask test client around a given fake LLM client."""
    def _make(llm_client):
        app = create_app(settings, llm_client=llm_client)
        app.config["TESTING"] = True
        return app.test_client()
    return _make
