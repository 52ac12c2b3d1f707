# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

import logging
from collections.abc import Iterable
from typing import NamedTuple

import httpx

from kubetransport.constants import DEFAULT_PORTS, HTTP_PROTOCOL_PREFIX, HTTPS_PROTOCOL_PREFIX
from kubetransport.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ProxyAddress(NamedTuple):
    host: str
    port: int

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"http://{host}:{self.port}"


def _parse_url(value: str, what: str) -> httpx.URL:
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid {what} URL {value!r}: {e}") from e
    if not url.host:
        raise ConfigurationError(f"Invalid {what} URL {value!r}: no host")
    return url


def _host_as_written(url: str) -> str:
    """Host part of an already validated URL, with its original case kept."""
    authority = url.split("://", 1)[1]
    for delimiter in "/?#":
        authority = authority.split(delimiter, 1)[0]
    authority = authority.rpartition("@")[2]
    if authority.startswith("["):
        return authority[1:].partition("]")[0]
    return authority.partition(":")[0]


def is_network_url(master_url: str) -> bool:
    return master_url.lower().startswith(HTTP_PROTOCOL_PREFIX) or master_url.startswith(
        HTTPS_PROTOCOL_PREFIX
    )


def resolve_proxy(
    master_url: str,
    http_proxy: str | None,
    https_proxy: str | None,
    no_proxy: Iterable[str],
) -> ProxyAddress | None:
    """Decide which proxy, if any, requests to ``master_url`` go through.

    ``no_proxy`` entries are plain suffixes of the master host and are not
    anchored on a label boundary, so ``ample.com`` also exempts
    ``example.com``.
    """
    if not is_network_url(master_url):
        return None

    master = _parse_url(master_url, "master")
    host = _host_as_written(master_url)

    for suffix in no_proxy:
        if suffix and host.endswith(suffix):
            logger.debug("Proxy bypassed", extra={"host": host, "no_proxy": suffix})
            return None

    proxy = http_proxy if master.scheme == "http" else https_proxy
    if not proxy:
        return None

    proxy_url = _parse_url(proxy, "proxy")
    try:
        port = proxy_url.port or DEFAULT_PORTS.get(proxy_url.scheme, DEFAULT_PORTS["http"])
    except ValueError as e:
        raise ConfigurationError(f"Invalid proxy URL {proxy!r}: {e}") from e

    logger.debug("Using proxy", extra={"host": host, "proxy": f"{proxy_url.host}:{port}"})
    return ProxyAddress(proxy_url.host, port)
