"""Credential and model resolution from process-wide configuration."""

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from .constants import (
    DEFAULT_MODEL,
    GEMINI_API_KEY_ENV,
    GEMINI_API_KEY_PARAMETER_ENV,
    GEMINI_MODEL_ENV,
    CredentialSource,
)
from .errors import ConfigError
from .infra.runtime import fetch_secure_parameter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    credential: str = field(repr=False)
    model: str = DEFAULT_MODEL


class ConfigResolver:
    """Resolves the upstream credential on every invocation.

    The environment variable wins; an SSM parameter named by
    ``GEMINI_API_KEY_PARAMETER_NAME`` is the fallback. A missing credential is
    re-checked on the next call rather than remembered.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        parameter_fetcher: Callable[[str], str] = fetch_secure_parameter,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._parameter_fetcher = parameter_fetcher

    def resolve(self) -> ResolvedConfig:
        credential, source = self._resolve_credential()
        if not credential:
            logger.error(
                "Upstream credential is not configured",
                extra={
                    "env_var": GEMINI_API_KEY_ENV,
                    "parameter_env_var": GEMINI_API_KEY_PARAMETER_ENV,
                },
            )
            raise ConfigError()

        logger.info(
            "Upstream credential resolved",
            extra={"credential_source": source, "credential_length": len(credential)},
        )
        model = self._environ.get(GEMINI_MODEL_ENV, "").strip() or DEFAULT_MODEL
        return ResolvedConfig(credential=credential, model=model)

    def _resolve_credential(self) -> tuple[str, CredentialSource | None]:
        credential = self._environ.get(GEMINI_API_KEY_ENV, "").strip()
        if credential:
            return credential, "environment"

        parameter_name = self._environ.get(GEMINI_API_KEY_PARAMETER_ENV, "").strip()
        if not parameter_name:
            return "", None
        try:
            return self._parameter_fetcher(parameter_name).strip(), "ssm"
        except Exception as exc:
            logger.warning(
                "Failed to read upstream credential from SSM",
                extra={"parameter_name": parameter_name},
                exc_info=True,
            )
            raise ConfigError() from exc
