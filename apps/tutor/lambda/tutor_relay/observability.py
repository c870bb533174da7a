"""Observability hooks invoked at the relay's attempt, retry, success and failure points."""

import logging
from typing import Protocol

from .constants import MAX_LOGGED_ERROR_BODY_LENGTH
from .errors import FailureKind

logger = logging.getLogger(__name__)


class RelayObserver(Protocol):
    def request_received(self, prompt_length: int) -> None: ...

    def attempt_started(self, attempt: int) -> None: ...

    def retry_scheduled(self, attempt: int, status_code: int, delay_ms: int) -> None: ...

    def upstream_rejected(self, status_code: int, body: str) -> None: ...

    def succeeded(self, attempts: int, response_length: int) -> None: ...

    def failed(self, kind: FailureKind, status_code: int, attempts: int) -> None: ...

    def fault(self, error: BaseException) -> None: ...


class LoggingRelayObserver:
    """Writes structured log records; never logs the prompt text or credential."""

    def request_received(self, prompt_length: int) -> None:
        logger.info("Relay request received", extra={"prompt_length": prompt_length})

    def attempt_started(self, attempt: int) -> None:
        logger.info("Upstream attempt started", extra={"attempt": attempt})

    def retry_scheduled(self, attempt: int, status_code: int, delay_ms: int) -> None:
        logger.warning(
            "Upstream overloaded; retrying after backoff",
            extra={"attempt": attempt, "status_code": status_code, "delay_ms": delay_ms},
        )

    def upstream_rejected(self, status_code: int, body: str) -> None:
        logger.error(
            "Upstream responded with an error",
            extra={
                "status_code": status_code,
                "error_body": body[:MAX_LOGGED_ERROR_BODY_LENGTH],
            },
        )

    def succeeded(self, attempts: int, response_length: int) -> None:
        logger.info(
            "Relay response generated",
            extra={"attempts": attempts, "response_length": response_length},
        )

    def failed(self, kind: FailureKind, status_code: int, attempts: int) -> None:
        logger.error(
            "Relay request failed",
            extra={"failure_kind": kind.value, "status_code": status_code, "attempts": attempts},
        )

    def fault(self, error: BaseException) -> None:
        logger.error("Unexpected fault while relaying prompt", exc_info=error)
