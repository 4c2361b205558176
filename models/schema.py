from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Centralized wire constants to prevent drift between clients and the stub service.

DEFAULT_BASE_URL = "https://api.checkhim.tech"
DEFAULT_TIMEOUT_SECONDS = 30.0

VERIFY_PATH = "/api/verify"
REQUEST_TYPE = "frontend"  # routing discriminator, never exposed to callers
USER_AGENT = "checkhim-python-sdk/1.0"


class VerifyRequest(BaseModel):
    """Caller-facing request. `number` should be international format, e.g. +5511984339000."""

    number: str


class VerifyResponse(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    carrier: str = ""
    valid: bool = False

    # null on the wire means "not known", same as an absent field
    @field_validator("carrier", "valid", mode="before")
    @classmethod
    def _null_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].default
        return v


class WireVerifyRequest(BaseModel):
    number: str
    type: str = REQUEST_TYPE


class ErrorResponse(BaseModel):
    model_config = ConfigDict(strict=True)

    error: str = ""
    code: str = ""
    details: Optional[Dict[str, Any]] = Field(default=None)

    @field_validator("error", "code", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v
