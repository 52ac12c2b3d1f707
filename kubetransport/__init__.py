# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

from kubetransport.auth import BasicChallengeAuth, BearerTokenAuth, Challenge, select_auth
from kubetransport.client import (
    ClientOptions,
    build_client_options,
    create_async_http_client,
    create_http_client,
)
from kubetransport.config import Config, Settings, settings
from kubetransport.errors import ConfigurationError, KubeClientError, TLSUnavailableError
from kubetransport.proxy import ProxyAddress, resolve_proxy
from kubetransport.trust import TrustPolicy, accept_any_hostname, resolve_trust

__all__ = [
    # Config
    "Config",
    "Settings",
    "settings",
    # Client
    "ClientOptions",
    "build_client_options",
    "create_http_client",
    "create_async_http_client",
    # Auth
    "BasicChallengeAuth",
    "BearerTokenAuth",
    "Challenge",
    "select_auth",
    # Proxy
    "ProxyAddress",
    "resolve_proxy",
    # Trust
    "TrustPolicy",
    "accept_any_hostname",
    "resolve_trust",
    # Errors
    "KubeClientError",
    "ConfigurationError",
    "TLSUnavailableError",
]
