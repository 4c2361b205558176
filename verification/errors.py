"""Error taxonomy for the verification clients.

Callers branch on the class: ``InvalidRequestError`` and ``APIError`` mean the
request was rejected (locally or by the service), ``TransportError`` means the
service was never reached, ``VerificationCancelledError`` means the caller's
deadline fired first, and ``DeserializationError`` means the service answered
200 with a body that is not a verify response.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CheckHimError(Exception):
    """Base error for everything raised by the verification clients."""

    def to_dict(self) -> Dict[str, Any]:
        return {"error_type": type(self).__name__, "message": str(self)}


class APIError(CheckHimError):
    """The service answered with a non-200 status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: str = "",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code or ""
        self.details = details
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.code:
            return f"checkhim: {self.message} (code: {self.code}, status: {self.status_code})"
        return f"checkhim: {self.message} (status: {self.status_code})"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "error_type": type(self).__name__,
            "status_code": self.status_code,
            "message": self.message,
            "code": self.code,
        }
        if self.details:
            out["details"] = self.details
        return out


class InvalidRequestError(APIError):
    """Rejected locally before any network call."""

    def __init__(self, message: str = "phone number is required") -> None:
        super().__init__(status_code=400, message=message, code="invalid_request")


class TransportError(CheckHimError):
    """The request never completed at the protocol level (DNS, connect, read timeout)."""


class VerificationCancelledError(CheckHimError):
    """The caller gave up before the service responded."""


class DeadlineExceededError(VerificationCancelledError):
    def __init__(self, deadline: float) -> None:
        self.deadline = deadline
        super().__init__(f"checkhim: verify deadline exceeded after {deadline:g}s")

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["deadline"] = self.deadline
        return out


class DeserializationError(CheckHimError):
    """A 200 response whose body does not match the verify response shape."""
