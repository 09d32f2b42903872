"""
Shared dependencies for the API routers.

Both are plain callables so tests can swap them through
``app.dependency_overrides``.
"""
from typing import Iterator

from datalens.core.config import settings
from datalens.domain.analysis.client import GeminiAnalysisClient
from datalens.domain.analysis.pipeline import AnalysisLimits


def get_analysis_limits() -> AnalysisLimits:
    return AnalysisLimits.from_settings(settings)


def get_analysis_client() -> Iterator[GeminiAnalysisClient]:
    """One client (and HTTP session) per request."""
    client = GeminiAnalysisClient.from_settings(settings)
    try:
        yield client
    finally:
        client.close()
