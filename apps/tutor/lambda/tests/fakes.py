"""Test doubles shared by the relay test modules."""

import json

from tutor_relay.config import ResolvedConfig
from tutor_relay.providers.base import UpstreamResponse


def gemini_response(*texts: str, status_code: int = 200) -> UpstreamResponse:
    body = {"candidates": [{"content": {"parts": [{"text": text}]}} for text in texts]}
    return UpstreamResponse(status_code=status_code, body=json.dumps(body).encode())


def error_response(status_code: int) -> UpstreamResponse:
    return UpstreamResponse(status_code=status_code, body=b'{"error": {"message": "upstream"}}')


class StubCaller:
    def __init__(self, *results: UpstreamResponse | Exception) -> None:
        self._results = list(results)
        self.calls: list[tuple[str, ResolvedConfig]] = []

    async def call(self, prompt: str, config: ResolvedConfig) -> UpstreamResponse:
        self.calls.append((prompt, config))
        result = self._results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
