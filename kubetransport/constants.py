# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

HTTP_PROTOCOL_PREFIX = "http://"
HTTPS_PROTOCOL_PREFIX = "https://"
UNIX_SOCKET_PREFIX = "unix://"

DEFAULT_PORTS: dict[str, int] = {
    "http": 80,
    "https": 443,
}

# Used for any timeout the connection config leaves unset
DEFAULT_TIMEOUT_SECONDS = 10.0


class Headers:
    AUTHORIZATION = "Authorization"
    PROXY_AUTHORIZATION = "Proxy-Authorization"
    WWW_AUTHENTICATE = "WWW-Authenticate"


headers = Headers()

SENSITIVE_HEADERS = {
    headers.AUTHORIZATION.lower(),
    headers.PROXY_AUTHORIZATION.lower(),
}
