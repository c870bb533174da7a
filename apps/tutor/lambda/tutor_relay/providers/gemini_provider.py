"""Gemini generateContent caller for tutor prompts."""

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx
from langsmith import traceable

from tutor_relay.config import ResolvedConfig
from tutor_relay.constants import GEMINI_API_BASE_URL, TUTOR_PROMPT_TEMPLATE
from tutor_relay.infra.runtime import create_http_client

from .base import UpstreamRequest, UpstreamResponse

logger = logging.getLogger(__name__)


def _redact_trace_inputs(inputs: dict[str, Any]) -> dict[str, Any]:
    config = inputs.get("config")
    return {
        "prompt": inputs.get("prompt"),
        "model": getattr(config, "model", None),
    }


def build_instruction(prompt: str) -> str:
    return TUTOR_PROMPT_TEMPLATE.format(prompt=prompt)


class GeminiUpstreamCaller:
    def __init__(
        self,
        client_factory: Callable[[], httpx.AsyncClient] = create_http_client,
        base_url: str = GEMINI_API_BASE_URL,
    ) -> None:
        self._client_factory = client_factory
        self._base_url = base_url.rstrip("/")

    def build_request(self, prompt: str, config: ResolvedConfig) -> UpstreamRequest:
        endpoint = httpx.URL(
            f"{self._base_url}/{config.model}:generateContent",
            params={"key": config.credential},
        )
        return UpstreamRequest(
            url=str(endpoint),
            body={"contents": [{"parts": [{"text": build_instruction(prompt)}]}]},
        )

    @traceable(
        run_type="llm",
        name="gemini.generateContent",
        process_inputs=_redact_trace_inputs,
    )
    async def call(self, prompt: str, config: ResolvedConfig) -> UpstreamResponse:
        request = self.build_request(prompt, config)

        start = time.time()
        async with self._client_factory() as client:
            response = await client.post(
                request.url,
                json=request.body,
                headers={"Content-Type": "application/json"},
            )
        duration_ms = int((time.time() - start) * 1000)

        logger.info(
            "Upstream call completed",
            extra={
                "upstream_duration_ms": duration_ms,
                "model": config.model,
                "status_code": response.status_code,
                "response_bytes": len(response.content),
            },
        )
        return UpstreamResponse(status_code=response.status_code, body=response.content)
