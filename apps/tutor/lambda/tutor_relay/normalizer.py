"""Mapping of terminal outcomes and boundary errors onto the relay's result type."""

from dataclasses import dataclass

from .errors import FailureKind, RelayError, UnexpectedFault
from .orchestration.retry import RetryOutcome


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Failure:
    status_code: int
    message: str
    kind: FailureKind


NormalizedResult = Success | Failure


class ResponseNormalizer:
    def normalize(self, outcome: RetryOutcome) -> NormalizedResult:
        if outcome.succeeded and outcome.text is not None:
            return Success(text=outcome.text)
        return self.from_error(outcome.error or UnexpectedFault("Outcome carried no error"))

    def from_error(self, error: RelayError) -> Failure:
        return Failure(
            status_code=error.status_code,
            message=error.kind.message,
            kind=error.kind,
        )
