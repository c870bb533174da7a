"""Upstream caller interface and the request/response values exchanged with it."""

import json
from dataclasses import dataclass, field
from typing import Any, Protocol

from tutor_relay.config import ResolvedConfig


@dataclass(frozen=True)
class UpstreamRequest:
    url: str = field(repr=False)
    body: dict[str, Any]


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.body)

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class UpstreamCaller(Protocol):
    async def call(self, prompt: str, config: ResolvedConfig) -> UpstreamResponse:
        """Issue exactly one outbound call; retrying is the caller's concern."""
        ...
