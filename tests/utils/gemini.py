"""
Scripted stand-ins for the Gemini REST endpoint.
"""
import json
from typing import Any, List, Optional


def gemini_body(payload: Any) -> dict:
    """Wrap an analysis payload the way generateContent returns it."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._body = body
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeSession:
    """
    Plays back one outcome per ``post`` call.

    An outcome is a FakeResponse, an int status code, a dict body (200), or
    an exception instance to raise.
    """

    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.calls: List[dict] = []
        self.closed = False

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if not self.outcomes:
            raise AssertionError("FakeSession received more calls than scripted")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            return FakeResponse(status_code=outcome, text=f"status {outcome}")
        if isinstance(outcome, dict):
            return FakeResponse(status_code=200, body=outcome)
        return outcome

    def close(self):
        self.closed = True
