from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Union

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

log = logging.getLogger("checkhim.client")


class CheckHimClient:
    """Blocking client for the CheckHim phone verification endpoint.

    Holds no per-call state; one instance can be shared across threads and
    reuses the connection pool of its ``httpx.Client``.
    """

    def __init__(self, api_key: str, *configs: ClientConfig):
        config = resolve_config(*configs)
        self.api_key = api_key
        self.base_url = config.base_url
        self.timeout = config.timeout
        self._owns_http = config.http_client is None
        self.http: httpx.Client = httpx.Client(timeout=config.timeout) if self._owns_http else config.http_client

    @classmethod
    def from_settings(cls, s: Optional[Settings] = None) -> "CheckHimClient":
        s = s if s is not None else default_settings
        if not s.CHECKHIM_API_KEY:
            raise RuntimeError("CHECKHIM_API_KEY not configured")
        return cls(
            s.CHECKHIM_API_KEY,
            ClientConfig(base_url=s.CHECKHIM_BASE_URL, timeout=s.CHECKHIM_TIMEOUT_SECONDS),
        )

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "CheckHimClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def verify(self, request: Union[VerifyRequest, str], timeout: Optional[float] = None) -> VerifyResponse:
        """Verify one phone number.

        ``timeout`` is the caller's deadline in seconds for the whole call. Every
        connect/write/read is bounded by the time left, the deadline is re-checked
        after the headers and after each body chunk, and its expiry raises
        ``DeadlineExceededError`` instead of ``TransportError``.
        """
        req = coerce_request(request)
        ensure_number(req)

        url = verify_url(self.base_url)
        t = Timer()
        expires_at = t.start + timeout if timeout is not None else None

        log_attempt(log, req.number, url)
        try:
            try:
                status_code, body = self._exchange(url, req, timeout, expires_at)
            except httpx.TimeoutException as e:
                if timeout is not None:
                    raise DeadlineExceededError(timeout) from e
                raise TransportError(f"checkhim: request timed out: {e}") from e
            except httpx.RequestError as e:
                raise TransportError(f"checkhim: failed to execute request: {e}") from e

            resp = parse_response(status_code, body)
        except CheckHimError as e:
            log_failure(log, req.number, e, t)
            raise

        log_result(log, req.number, resp, t)
        return resp

    def _exchange(
        self,
        url: str,
        req: VerifyRequest,
        timeout: Optional[float],
        expires_at: Optional[float],
    ) -> Tuple[int, bytes]:
        kwargs: Dict[str, Any] = {}
        if expires_at is not None:
            kwargs["timeout"] = _time_left(expires_at, timeout)

        with self.http.stream("POST", url, json=build_payload(req), headers=build_headers(self.api_key), **kwargs) as r:
            if expires_at is None:
                return r.status_code, r.read()

            _time_left(expires_at, timeout)
            chunks: List[bytes] = []
            for chunk in r.iter_bytes():
                chunks.append(chunk)
                _time_left(expires_at, timeout)
            return r.status_code, b"".join(chunks)


def _time_left(expires_at: float, timeout: Optional[float]) -> float:
    left = expires_at - time.monotonic()
    if left <= 0:
        raise DeadlineExceededError(timeout or 0.0)
    return left
