"""Runtime infrastructure helpers for secrets, tracing, and the outbound HTTP client."""

import logging
import os
from functools import lru_cache
from typing import Any

import boto3
import httpx
from langsmith.run_trees import get_cached_client

from tutor_relay.constants import (
    AWS_REGION_ENV,
    DEFAULT_AWS_REGION,
    LANGSMITH_API_KEY_PARAMETER_ENV,
    LANGSMITH_PROJECT,
    UPSTREAM_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

# httpx logs request URLs at INFO, and the upstream URL carries the API key.
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def _get_secure_parameter(ssm_client: Any, parameter_name: str) -> str:
    result = ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
    value = result["Parameter"].get("Value")
    if not value:
        raise RuntimeError(f"SSM parameter {parameter_name} has no value")
    return value


@lru_cache(maxsize=1)
def get_ssm_client() -> Any:
    return boto3.client("ssm", region_name=os.environ.get(AWS_REGION_ENV, DEFAULT_AWS_REGION))


def fetch_secure_parameter(parameter_name: str) -> str:
    """Read a SecureString parameter; never cached so rotated keys are picked up."""
    return _get_secure_parameter(get_ssm_client(), parameter_name)


def _get_optional_secure_parameter(parameter_name: str | None) -> str | None:
    if not parameter_name:
        return None
    try:
        return fetch_secure_parameter(parameter_name)
    except Exception:
        logger.warning(
            "Optional SSM parameter is unavailable; disabling dependent feature",
            extra={"parameter_name": parameter_name},
            exc_info=True,
        )
        return None


def _configure_langsmith(langsmith_api_key: str | None) -> None:
    if not langsmith_api_key:
        os.environ.pop("LANGSMITH_TRACING", None)
        os.environ.pop("LANGSMITH_API_KEY", None)
        logger.info("LangSmith tracing disabled because API key is unavailable")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = langsmith_api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Configure LangSmith environment variables (called once via lru_cache)."""
    parameter_name = os.environ.get(LANGSMITH_API_KEY_PARAMETER_ENV)
    _configure_langsmith(
        _get_optional_secure_parameter(parameter_name) or os.environ.get("LANGSMITH_API_KEY")
    )


def flush_langsmith_traces() -> None:
    if os.environ.get("LANGSMITH_TRACING", "").lower() != "true":
        return
    if not os.environ.get("LANGSMITH_API_KEY"):
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("Failed to flush LangSmith traces", exc_info=True)


def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=UPSTREAM_TIMEOUT_SECONDS)
