# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

import logging
import time

import httpx

from kubetransport.constants import SENSITIVE_HEADERS
from kubetransport.logging_config import TRACE, TRACE_LOGGER_NAME
from kubetransport.proxy import ProxyAddress

logger = logging.getLogger(TRACE_LOGGER_NAME)


def is_trace_enabled() -> bool:
    return logger.isEnabledFor(TRACE)


def _format_headers(headers: httpx.Headers) -> str:
    lines = []
    for name, value in headers.multi_items():
        if name.lower() in SENSITIVE_HEADERS:
            value = "<redacted>"
        lines.append(f"{name}: {value}")
    return "\n".join(lines)


def _connection(request: httpx.Request, proxy: ProxyAddress | None) -> str:
    route = f"{proxy.host}:{proxy.port}" if proxy else "DIRECT"
    return f"Connection{{{request.url.netloc.decode('ascii')}, proxy={route}}}"


def _log_request(request: httpx.Request, proxy: ProxyAddress | None) -> None:
    logger.log(
        TRACE,
        "Sending request %s %s on %s\n%s",
        request.method,
        request.url,
        _connection(request, proxy),
        _format_headers(request.headers),
    )


def _log_response(response: httpx.Response, request: httpx.Request, started: float) -> None:
    elapsed_ms = (time.monotonic() - started) * 1000
    logger.log(
        TRACE,
        "Received %d response for %s %s in %.1fms\n%s",
        response.status_code,
        request.method,
        request.url,
        elapsed_ms,
        _format_headers(response.headers),
    )


class TracingTransport(httpx.BaseTransport):
    """Logs every request/response pair at TRACE, leaving both untouched."""

    def __init__(self, transport: httpx.BaseTransport, proxy: ProxyAddress | None = None) -> None:
        self._transport = transport
        self._proxy = proxy

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        started = time.monotonic()
        _log_request(request, self._proxy)

        response = self._transport.handle_request(request)

        _log_response(response, request, started)
        return response

    def close(self) -> None:
        self._transport.close()


class AsyncTracingTransport(httpx.AsyncBaseTransport):
    def __init__(
        self, transport: httpx.AsyncBaseTransport, proxy: ProxyAddress | None = None
    ) -> None:
        self._transport = transport
        self._proxy = proxy

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        started = time.monotonic()
        _log_request(request, self._proxy)

        response = await self._transport.handle_async_request(request)

        _log_response(response, request, started)
        return response

    async def aclose(self) -> None:
        await self._transport.aclose()
