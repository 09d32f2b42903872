"""
Pytest configuration and fixtures for DataLens tests.

Nothing here talks to the real Gemini API: the analysis client is always
built around a fake ``requests`` session, and retry sleeps are recorded
instead of slept.
"""

import os

# Settings are read at import time; keep a developer's .env key out of the tests.
os.environ["GEMINI_API_KEY"] = "test-key"

import pytest

from datalens.domain.analysis.client import GeminiAnalysisClient
from datalens.domain.analysis.retry import RetryPolicy
from tests.utils.gemini import FakeSession, gemini_body


SAMPLE_ANALYSIS = {
    "summary": "ok",
    "kpis": ["Revenue: $100"],
    "charts": [
        {"type": "bar", "x": "date", "y": "revenue", "title": "Revenue", "insight": "flat"}
    ],
}


@pytest.fixture
def revenue_csv() -> bytes:
    return b"date,revenue\n2024-01-01,100\n2024-01-02,100\n2024-01-03,100\n"


@pytest.fixture
def sleeps():
    """Delays requested by the client, in order."""
    return []


@pytest.fixture
def make_client(sleeps):
    """Build a GeminiAnalysisClient around a scripted fake session."""
    def _make(*outcomes, api_key="test-key", max_attempts=3):
        session = FakeSession(list(outcomes))
        client = GeminiAnalysisClient(
            api_key=api_key,
            retry_policy=RetryPolicy(max_attempts=max_attempts),
            session=session,
            sleep=sleeps.append,
        )
        return client, session
    return _make


@pytest.fixture
def ok_body():
    return gemini_body(SAMPLE_ANALYSIS)
