"""Pydantic schemas for the tutor relay API."""

from pydantic import BaseModel, ConfigDict, Field


class PromptRequest(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    prompt: str = Field(min_length=1)


class RelayResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str
