"""Application service relaying one tutor prompt to the upstream model."""

from typing import Any

from tutor_relay.config import ConfigResolver
from tutor_relay.errors import RelayError, UnexpectedFault
from tutor_relay.normalizer import Failure, NormalizedResult, ResponseNormalizer
from tutor_relay.observability import LoggingRelayObserver, RelayObserver
from tutor_relay.orchestration.retry import RetryController
from tutor_relay.validation import validate_request


class RelayHandler:
    def __init__(
        self,
        config_resolver: ConfigResolver,
        retry_controller: RetryController,
        normalizer: ResponseNormalizer | None = None,
        observer: RelayObserver | None = None,
    ) -> None:
        self._config_resolver = config_resolver
        self._retry_controller = retry_controller
        self._normalizer = normalizer or ResponseNormalizer()
        self._observer = observer or LoggingRelayObserver()

    async def handle(self, payload: Any) -> NormalizedResult:
        """Run one invocation; every failure comes back as a ``Failure`` value."""
        attempts = 0
        try:
            request = validate_request(payload)
            self._observer.request_received(len(request.prompt))
            config = self._config_resolver.resolve()
            outcome = await self._retry_controller.run(request.prompt, config)
            attempts = outcome.attempts
            result = self._normalizer.normalize(outcome)
        except RelayError as exc:
            result = self._normalizer.from_error(exc)
        except Exception as exc:
            self._observer.fault(exc)
            result = self._normalizer.from_error(UnexpectedFault(str(exc)))

        if isinstance(result, Failure):
            self._observer.failed(result.kind, result.status_code, attempts)
        else:
            self._observer.succeeded(attempts, len(result.text))
        return result
