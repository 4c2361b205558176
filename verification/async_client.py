from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Union

import httpx

from config.settings import Settings, settings as default_settings
from models.schema import VerifyRequest, VerifyResponse
from ops.metrics import Timer
from verification.errors import CheckHimError, DeadlineExceededError, TransportError
from verification.options import ClientConfig, resolve_config
from verification.wire import (
    build_headers,
    build_payload,
    coerce_request,
    ensure_number,
    log_attempt,
    log_failure,
    log_result,
    parse_response,
    verify_url,
)

log = logging.getLogger("checkhim.async_client")


class AsyncCheckHimClient:
    """Cancellable client built on ``httpx.AsyncClient``.

    Cancelling the awaiting task abandons the in-flight request and re-raises
    ``asyncio.CancelledError``. A ``timeout`` passed to ``verify`` is a total
    deadline for the call.
    """

    def __init__(self, api_key: str, *configs: ClientConfig):
        config = resolve_config(*configs)
        self.api_key = api_key
        self.base_url = config.base_url
        self.timeout = config.timeout
        self._owns_http = config.http_client is None
        self.http: httpx.AsyncClient = httpx.AsyncClient(timeout=config.timeout) if self._owns_http else config.http_client

    @classmethod
    def from_settings(cls, s: Optional[Settings] = None) -> "AsyncCheckHimClient":
        s = s if s is not None else default_settings
        if not s.CHECKHIM_API_KEY:
            raise RuntimeError("CHECKHIM_API_KEY not configured")
        return cls(
            s.CHECKHIM_API_KEY,
            ClientConfig(base_url=s.CHECKHIM_BASE_URL, timeout=s.CHECKHIM_TIMEOUT_SECONDS),
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "AsyncCheckHimClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def verify(self, request: Union[VerifyRequest, str], timeout: Optional[float] = None) -> VerifyResponse:
        req = coerce_request(request)
        ensure_number(req)

        url = verify_url(self.base_url)
        t = Timer()
        log_attempt(log, req.number, url)
        try:
            if timeout is None:
                resp = await self._exchange(url, req)
            else:
                try:
                    resp = await asyncio.wait_for(self._exchange(url, req), timeout)
                except asyncio.TimeoutError as e:
                    raise DeadlineExceededError(timeout) from e
        except (CheckHimError, asyncio.CancelledError) as e:
            log_failure(log, req.number, e, t)
            raise

        log_result(log, req.number, resp, t)
        return resp

    async def _exchange(self, url: str, req: VerifyRequest) -> VerifyResponse:
        try:
            r = await self.http.post(url, json=build_payload(req), headers=build_headers(self.api_key))
        except httpx.TimeoutException as e:
            raise TransportError(f"checkhim: request timed out: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"checkhim: failed to execute request: {e}") from e
        return parse_response(r.status_code, r.content)
