"""Incoming payload validation."""

from typing import Any

import pydantic

from .errors import ValidationError
from .schemas import PromptRequest


def validate_request(payload: Any) -> PromptRequest:
    """Return the validated request or raise ``ValidationError``.

    The payload is whatever the transport parsed from the body, so ``None``,
    lists and scalars are all possible and all rejected.
    """
    try:
        return PromptRequest.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError() from exc
