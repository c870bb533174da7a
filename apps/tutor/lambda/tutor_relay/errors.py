"""Domain-level exceptions and failure classification for the tutor relay."""

from enum import Enum

from .constants import (
    CONFIG_INCOMPLETE_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    NO_OUTPUT_MESSAGE,
    OVERLOADED_MESSAGE,
    OVERLOADED_STATUS_CODE,
    PROMPT_REQUIRED_MESSAGE,
    UPSTREAM_ERROR_MESSAGE,
)


class FailureKind(Enum):
    INVALID_REQUEST = "invalid_request"
    CONFIG_INCOMPLETE = "config_incomplete"
    UPSTREAM_ERROR = "upstream_error"
    NO_OUTPUT = "no_output"
    OVERLOADED = "overloaded"
    INTERNAL = "internal"

    @property
    def default_status_code(self) -> int:
        return _DEFAULT_STATUS_CODES[self]

    @property
    def message(self) -> str:
        """Client-safe message; upstream error bodies never reach the client."""
        return _MESSAGES[self]


_DEFAULT_STATUS_CODES: dict[FailureKind, int] = {
    FailureKind.INVALID_REQUEST: 400,
    FailureKind.CONFIG_INCOMPLETE: 500,
    FailureKind.UPSTREAM_ERROR: 502,
    FailureKind.NO_OUTPUT: 500,
    FailureKind.OVERLOADED: OVERLOADED_STATUS_CODE,
    FailureKind.INTERNAL: 500,
}

_MESSAGES: dict[FailureKind, str] = {
    FailureKind.INVALID_REQUEST: PROMPT_REQUIRED_MESSAGE,
    FailureKind.CONFIG_INCOMPLETE: CONFIG_INCOMPLETE_MESSAGE,
    FailureKind.UPSTREAM_ERROR: UPSTREAM_ERROR_MESSAGE,
    FailureKind.NO_OUTPUT: NO_OUTPUT_MESSAGE,
    FailureKind.OVERLOADED: OVERLOADED_MESSAGE,
    FailureKind.INTERNAL: INTERNAL_ERROR_MESSAGE,
}


class RelayError(Exception):
    """Base class for failures that map onto a normalized error response."""

    kind = FailureKind.INTERNAL

    def __init__(self, detail: str | None = None, status_code: int | None = None) -> None:
        super().__init__(detail or self.kind.message)
        self.status_code = status_code or self.kind.default_status_code


class ValidationError(RelayError):
    """Raised when the client payload does not carry a usable prompt."""

    kind = FailureKind.INVALID_REQUEST


class ConfigError(RelayError):
    """Raised when the server is missing the upstream credential."""

    kind = FailureKind.CONFIG_INCOMPLETE


class UpstreamError(RelayError):
    kind = FailureKind.UPSTREAM_ERROR


class RetryableUpstreamError(UpstreamError):
    """Transient overload or rate limiting that outlived every retry."""

    kind = FailureKind.OVERLOADED


class NonRetryableUpstreamError(UpstreamError):
    kind = FailureKind.UPSTREAM_ERROR


class EmptyOutputError(UpstreamError):
    """Upstream succeeded but returned no candidates."""

    kind = FailureKind.NO_OUTPUT


class UnexpectedFault(RelayError):
    kind = FailureKind.INTERNAL
