# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

"""Builds the shared HTTP client used to talk to the API server."""

import logging
from dataclasses import dataclass

import httpx

from kubetransport.auth import select_auth
from kubetransport.config import Config, settings
from kubetransport.constants import UNIX_SOCKET_PREFIX
from kubetransport.errors import ConfigurationError, KubeClientError, TLSUnavailableError
from kubetransport.proxy import ProxyAddress, resolve_proxy
from kubetransport.tracing import AsyncTracingTransport, TracingTransport, is_trace_enabled
from kubetransport.trust import TrustPolicy, resolve_trust

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientOptions:
    """Everything resolved from a Config, ready to hand to httpx."""

    trust: TrustPolicy
    auth: httpx.Auth | None
    timeout: httpx.Timeout
    proxy: ProxyAddress | None = None
    uds: str | None = None
    trace_enabled: bool = False
    follow_redirects: bool = True


def _timeout(config: Config) -> httpx.Timeout:
    overrides: dict[str, float] = {}
    if config.connection_timeout > 0:
        overrides["connect"] = config.connection_timeout / 1000
    if config.request_timeout > 0:
        overrides["read"] = config.request_timeout / 1000
    return httpx.Timeout(settings.default_timeout_seconds, **overrides)


def _unix_socket_path(master_url: str) -> str | None:
    if master_url.startswith(UNIX_SOCKET_PREFIX):
        return master_url[len(UNIX_SOCKET_PREFIX) :]
    return None


def build_client_options(config: Config, trace_enabled: bool | None = None) -> ClientOptions:
    """Resolve trust, auth, tracing, timeouts and proxy for ``config``.

    Raises ConfigurationError for malformed URLs or certificate material and
    TLSUnavailableError when the runtime cannot do TLS at all. Anything else
    is wrapped in KubeClientError.
    """
    try:
        trust = resolve_trust(config)
        auth = select_auth(config)
        if trace_enabled is None:
            trace_enabled = is_trace_enabled()
        timeout = _timeout(config)
        proxy = resolve_proxy(
            config.master_url,
            config.http_proxy,
            config.https_proxy,
            config.no_proxy,
        )
    except (KubeClientError, TLSUnavailableError):
        raise
    except Exception as e:
        raise KubeClientError.launder(e)

    return ClientOptions(
        trust=trust,
        auth=auth,
        timeout=timeout,
        proxy=proxy,
        uds=_unix_socket_path(config.master_url),
        trace_enabled=trace_enabled,
    )


def _log_created(kind: str, config: Config, options: ClientOptions) -> None:
    logger.info(
        "%s created",
        kind,
        extra={
            "master_url": config.master_url,
            "auth": type(options.auth).__name__ if options.auth else None,
            "proxy": options.proxy.url if options.proxy else None,
            "trace": options.trace_enabled,
        },
    )


def _network_transport(transport_cls, options: ClientOptions):
    try:
        return transport_cls(
            verify=options.trust.verify,
            proxy=options.proxy.url if options.proxy else None,
            uds=options.uds,
        )
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid proxy server configuration: {e}") from e
    except Exception as e:
        raise KubeClientError.launder(e)


def _log_supplied_transport(options: ClientOptions) -> None:
    logger.debug(
        "Using supplied transport; resolved TLS, proxy and socket settings are not applied",
        extra={
            "proxy": options.proxy.url if options.proxy else None,
            "uds": options.uds,
        },
    )


def create_http_client(
    config: Config,
    *,
    trace_enabled: bool | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create the shared sync client for ``config``.

    ``transport`` replaces the default connection pool. A supplied transport
    owns its own TLS context, proxy and socket, so the trust policy, proxy
    and ``uds`` resolved from ``config`` are not applied to it. Auth,
    redirects, timeouts and tracing still are.
    """
    options = build_client_options(config, trace_enabled)

    if transport is None:
        transport = _network_transport(httpx.HTTPTransport, options)
    else:
        _log_supplied_transport(options)
    if options.trace_enabled:
        transport = TracingTransport(transport, options.proxy)

    client = httpx.Client(
        auth=options.auth,
        timeout=options.timeout,
        follow_redirects=options.follow_redirects,
        transport=transport,
        trust_env=False,
    )
    _log_created("HTTP client", config, options)
    return client


def create_async_http_client(
    config: Config,
    *,
    trace_enabled: bool | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Async counterpart of create_http_client; a supplied transport is used as is."""
    options = build_client_options(config, trace_enabled)

    if transport is None:
        transport = _network_transport(httpx.AsyncHTTPTransport, options)
    else:
        _log_supplied_transport(options)
    if options.trace_enabled:
        transport = AsyncTracingTransport(transport, options.proxy)

    client = httpx.AsyncClient(
        auth=options.auth,
        timeout=options.timeout,
        follow_redirects=options.follow_redirects,
        transport=transport,
        trust_env=False,
    )
    _log_created("Async HTTP client", config, options)
    return client
