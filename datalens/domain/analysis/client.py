"""
Gemini client for dataset analysis.

Sends one structured-output ``generateContent`` request per attempt, retries
rate limiting and transport failures with exponential backoff, and validates
the returned JSON against the analysis contract.
"""
import json
import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from datalens.core.errors import ConfigurationError, MalformedResponse, RemoteAnalysisError
from datalens.domain.analysis.contract import AnalysisContract
from datalens.domain.analysis.prompt import AnalysisPrompt
from datalens.domain.analysis.retry import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash-latest"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
ERROR_BODY_PREVIEW_CHARS = 500


def build_generation_payload(prompt: AnalysisPrompt) -> Dict[str, Any]:
    """Request body for a JSON-mode ``generateContent`` call."""
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt.text}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": prompt.response_schema,
        },
    }


def extract_response_text(body: Any) -> str:
    """
    Pull ``candidates[0].content.parts[0].text`` out of a Gemini response.

    Raises:
        MalformedResponse: any step of the path is missing or has the wrong type
    """
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponse(
            "Invalid or empty response from the analysis service: no candidate text",
        ) from e
    if not isinstance(text, str):
        raise MalformedResponse("Candidate text is not a string")
    return text


def _preview(text: str) -> str:
    if len(text) <= ERROR_BODY_PREVIEW_CHARS:
        return text
    return text[:ERROR_BODY_PREVIEW_CHARS] + "..."


class GeminiAnalysisClient:
    """Calls the Gemini REST API and returns a validated :class:`AnalysisContract`."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 60,
        retry_policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = (api_key or "").strip()
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings, session: Optional[requests.Session] = None) -> "GeminiAnalysisClient":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            api_base=settings.gemini_api_base,
            timeout=settings.llm_api_timeout,
            retry_policy=RetryPolicy.from_settings(settings),
            session=session,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "GeminiAnalysisClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ConfigurationError(
                "Gemini API key not configured. Set GEMINI_API_KEY in the environment."
            )

    def analyze(self, prompt: AnalysisPrompt) -> AnalysisContract:
        """
        Run the analysis request and validate the answer.

        Raises:
            ConfigurationError: no API key; nothing is sent
            RemoteAnalysisError: non-retryable error status, or retries exhausted
            MalformedResponse: 200 response whose payload is not readable JSON
            InvalidContract: JSON that is missing the summary or charts array
        """
        self.ensure_configured()

        response = self._post_with_retry(build_generation_payload(prompt))

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Analysis service returned a non-JSON body: {e}") from e

        json_text = extract_response_text(body)
        try:
            parsed = json.loads(json_text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON from AI response: {_preview(json_text)}")
            raise MalformedResponse(f"Failed to parse AI response as JSON: {e}") from e

        contract = AnalysisContract.from_payload(parsed)
        logger.info(
            f"AI analysis received: {len(contract.kpis)} KPIs, {len(contract.charts)} charts"
        )
        return contract

    def _post_with_retry(self, payload: Dict[str, Any]) -> requests.Response:
        policy = self.retry_policy
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        last_status: Optional[int] = None
        last_error: Optional[str] = None
        delays = policy.delays()

        for attempt in range(1, policy.max_attempts + 1):
            try:
                response = self.session.post(
                    self.endpoint, headers=headers, json=payload, timeout=self.timeout
                )
            except requests.RequestException as e:
                if not policy.is_retryable(error=e):
                    raise RemoteAnalysisError(
                        f"Request to analysis service failed: {e}", attempts=attempt
                    ) from e
                last_status, last_error = None, f"{e.__class__.__name__}: {e}"
                logger.warning(
                    f"Attempt {attempt}/{policy.max_attempts} to reach {self.model} failed: {last_error}"
                )
            else:
                status = response.status_code
                if 200 <= status < 300:
                    if attempt > 1:
                        logger.info(f"Analysis request succeeded on attempt {attempt}")
                    return response

                body_preview = _preview(response.text or "")
                if not policy.is_retryable(status_code=status):
                    logger.error(f"Analysis request failed with status {status}: {body_preview}")
                    raise RemoteAnalysisError(
                        f"API call failed with status {status}: {body_preview}",
                        remote_status=status,
                        attempts=attempt,
                    )
                last_status, last_error = status, body_preview
                logger.warning(
                    f"Rate limit hit (status {status}) on attempt {attempt}/{policy.max_attempts}"
                )

            if attempt < policy.max_attempts:
                delay = next(delays)
                logger.info(f"Retrying analysis request in {delay:g} seconds...")
                self._sleep(delay)

        status_text = f"status {last_status}" if last_status is not None else "no response"
        raise RemoteAnalysisError(
            f"Analysis service unavailable after {policy.max_attempts} attempts "
            f"(last {status_text}: {last_error})",
            remote_status=last_status,
            attempts=policy.max_attempts,
        )
