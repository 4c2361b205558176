"""Local stand-in for the CheckHim verification service.

Speaks the same wire protocol as the real endpoint so clients can be exercised
without credentials or network access. ``create_app`` builds a plain ASGI app;
tests mount it in-process through FastAPI's TestClient or httpx.ASGITransport.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from models.schema import REQUEST_TYPE, VERIFY_PATH, VerifyResponse, WireVerifyRequest
from utils.redact import dest_hint

log = logging.getLogger("checkhim.mock_service")

# Longest prefix wins.
DEFAULT_CARRIERS: Dict[str, str] = {
    "+244": "UNITEL",
    "+5511": "VIVO",
    "+55": "CLARO",
    "+1": "VERIZON",
}

_E164 = re.compile(r"^\+[1-9]\d{6,14}$")


class ServiceError(Exception):
    def __init__(self, status_code: int, error: str, code: str = "", details: Optional[dict] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.code = code
        self.details = details


def _error_body(error: str, code: str = "", details: Optional[dict] = None) -> dict:
    body: dict = {"error": error}
    if code:
        body["code"] = code
    if details:
        body["details"] = details
    return body


def lookup_carrier(number: str, carriers: Dict[str, str]) -> str:
    for prefix in sorted(carriers, key=len, reverse=True):
        if number.startswith(prefix):
            return carriers[prefix]
    return ""


def create_app(api_key: str = "test-api-key", carriers: Optional[Dict[str, str]] = None) -> FastAPI:
    app = FastAPI(title="CheckHim Mock", version="1.0.0")
    app.state.api_key = api_key
    app.state.carriers = dict(DEFAULT_CARRIERS if carriers is None else carriers)
    app.state.received = []

    # Runs ahead of routing and body parsing, so a bad key wins over a bad body.
    @app.middleware("http")
    async def bearer_auth_middleware(request: Request, call_next):
        if request.url.path == VERIFY_PATH:
            auth = request.headers.get("authorization", "")
            if not auth.lower().startswith("bearer ") or auth.split(" ", 1)[1].strip() != app.state.api_key:
                log.warning(
                    "mock_verify_rejected",
                    extra={"extra": {"event": "mock_verify_rejected", "status_code": 401, "code": "unauthorized"}},
                )
                return JSONResponse(status_code=401, content=_error_body("Invalid API key", "unauthorized"))
        return await call_next(request)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        log.warning(
            "mock_verify_rejected",
            extra={"extra": {"event": "mock_verify_rejected", "status_code": exc.status_code, "code": exc.code}},
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.error, exc.code, exc.details))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = [".".join(str(p) for p in e.get("loc", ())) for e in exc.errors()]
        return JSONResponse(
            status_code=400,
            content=_error_body("invalid request body", "invalid_request", {"fields": fields}),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown routes and methods answer in plain text, like a bare proxy would.
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.post(VERIFY_PATH)
    async def verify(req: WireVerifyRequest):
        app.state.received.append(req.model_dump())

        if req.type != REQUEST_TYPE:
            raise ServiceError(400, "unsupported request type", "invalid_request", {"type": req.type})
        if not req.number:
            raise ServiceError(400, "phone number is required", "invalid_request")

        if not _E164.match(req.number):
            resp = VerifyResponse(carrier="", valid=False)
        else:
            carrier = lookup_carrier(req.number, app.state.carriers)
            resp = VerifyResponse(carrier=carrier, valid=bool(carrier))

        log.info(
            "mock_verify",
            extra={"extra": {"event": "mock_verify", "dest": dest_hint(req.number), "valid": resp.valid}},
        )
        return resp.model_dump()

    return app
