from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from models.schema import (
    ErrorResponse,
    REQUEST_TYPE,
    USER_AGENT,
    VERIFY_PATH,
    VerifyRequest,
    VerifyResponse,
    WireVerifyRequest,
)
from ops.metrics import Timer
from utils.redact import dest_hint
from verification.errors import APIError, CheckHimError, DeserializationError, InvalidRequestError


def coerce_request(request: Union[VerifyRequest, str]) -> VerifyRequest:
    if isinstance(request, VerifyRequest):
        return request
    return VerifyRequest(number=request)


def ensure_number(request: VerifyRequest) -> None:
    if not request.number:
        raise InvalidRequestError("phone number is required")


def verify_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}{VERIFY_PATH}"


def build_payload(request: VerifyRequest) -> Dict[str, Any]:
    return WireVerifyRequest(number=request.number, type=REQUEST_TYPE).model_dump()


def build_headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }


def parse_response(status_code: int, body: bytes) -> VerifyResponse:
    """Classify a fully-read response into a result or an error.

    Non-200 bodies that carry a structured error payload become an ``APIError``
    populated from it; any other non-200 body becomes an ``APIError`` whose
    message is the raw text. A 200 body that is not a verify response raises
    ``DeserializationError``.
    """
    if status_code != 200:
        try:
            err = ErrorResponse.model_validate_json(body)
        except ValidationError:
            raise APIError(status_code=status_code, message=body.decode("utf-8", errors="replace")) from None
        raise APIError(status_code=status_code, message=err.error, code=err.code, details=err.details)

    try:
        return VerifyResponse.model_validate_json(body)
    except ValidationError as e:
        raise DeserializationError(f"checkhim: failed to unmarshal response: {e}") from e


def log_attempt(logger: logging.Logger, number: str, url: str) -> None:
    logger.info(
        "verify_attempt",
        extra={"extra": {"event": "verify_attempt", "dest": dest_hint(number), "url": url}},
    )


def log_result(logger: logging.Logger, number: str, resp: VerifyResponse, timer: Timer) -> None:
    logger.info(
        "verify_result",
        extra={
            "extra": {
                "event": "verify_result",
                "dest": dest_hint(number),
                "valid": resp.valid,
                "carrier": resp.carrier,
                "latency_ms": timer.ms(),
            }
        },
    )


def log_failure(logger: logging.Logger, number: str, exc: BaseException, timer: Optional[Timer] = None) -> None:
    info: Dict[str, Any] = {
        "event": "verify_failed",
        "dest": dest_hint(number),
        "error_type": type(exc).__name__,
        "message": str(exc),
    }
    if isinstance(exc, APIError):
        info["status_code"] = exc.status_code
        info["code"] = exc.code
    if timer is not None:
        info["latency_ms"] = timer.ms()
    level = logging.WARNING if isinstance(exc, CheckHimError) else logging.INFO
    logger.log(level, "verify_failed", extra={"extra": info})
