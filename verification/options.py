from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from models.schema import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class ClientConfig:
    """Optional overrides for a client. Zero values fall back to the defaults.

    Attributes:
        base_url: Service root, without the ``/api/verify`` path.
        timeout: Transport timeout in seconds for a client-built transport.
        http_client: Caller-owned ``httpx.Client`` (or ``httpx.AsyncClient`` for the
            async client). When given, ``timeout`` is not applied to it.
    """

    base_url: str = ""
    timeout: float = 0.0
    http_client: Optional[Any] = None


def resolve_config(*configs: ClientConfig) -> ClientConfig:
    # Only the first override counts; fields fall back independently.
    base_url = DEFAULT_BASE_URL
    timeout = DEFAULT_TIMEOUT_SECONDS
    http_client = None

    if configs:
        first = configs[0]
        if first.base_url:
            base_url = first.base_url
        if first.timeout and first.timeout > 0:
            timeout = float(first.timeout)
        if first.http_client is not None:
            http_client = first.http_client

    return ClientConfig(base_url=base_url, timeout=timeout, http_client=http_client)
