# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

import base64
import logging
import re
from collections.abc import Generator
from typing import NamedTuple
from urllib.request import parse_http_list

import httpx

from kubetransport.config import Config
from kubetransport.constants import headers

logger = logging.getLogger(__name__)

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_PARAM_RE = re.compile(rf'\s*({_TOKEN})\s*=\s*(?:"((?:[^"\\]|\\.)*)"|({_TOKEN}))\s*')
_SCHEME_RE = re.compile(rf"\s*({_TOKEN})(?:\s+|$)")


class Challenge(NamedTuple):
    scheme: str
    realm: str | None = None


def parse_challenges(response: httpx.Response) -> list[Challenge]:
    """Parse every ``WWW-Authenticate`` challenge carried by a 401 response.

    Comma-separated pieces that look like ``name=value`` continue the previous
    challenge; anything else starts a new one.
    """
    challenges: list[Challenge] = []
    for header_value in response.headers.get_list(headers.WWW_AUTHENTICATE):
        scheme: str | None = None
        realm: str | None = None
        for piece in parse_http_list(header_value):
            if not piece.strip():
                continue
            param = _PARAM_RE.fullmatch(piece)
            if param and scheme is not None:
                if param.group(1).lower() == "realm":
                    realm = param.group(2) if param.group(2) is not None else param.group(3)
                continue

            match = _SCHEME_RE.match(piece)
            if match is None:
                continue
            if scheme is not None:
                challenges.append(Challenge(scheme, realm))
            scheme, realm = match.group(1), None

            rest = piece[match.end() :]
            param = _PARAM_RE.fullmatch(rest) if rest.strip() else None
            if param and param.group(1).lower() == "realm":
                realm = param.group(2) if param.group(2) is not None else param.group(3)
        if scheme is not None:
            challenges.append(Challenge(scheme, realm))
    return challenges


def basic_credentials(username: str, password: str) -> str:
    encoded = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


class BasicChallengeAuth(httpx.Auth):
    """Answers a ``Basic`` challenge on a 401 with a single retry."""

    def __init__(self, username: str, password: str) -> None:
        self._credentials = basic_credentials(username, password)

    def authenticate(self, response: httpx.Response) -> httpx.Request | None:
        for challenge in parse_challenges(response):
            if challenge.scheme.lower() != "basic":
                continue
            request = response.request
            request.headers[headers.AUTHORIZATION] = self._credentials
            return request
        return None

    def authenticate_proxy(self, _response: httpx.Response) -> httpx.Request | None:
        return None

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        response = yield request

        if response.status_code == 401:
            retry = self.authenticate(response)
        elif response.status_code == 407:
            retry = self.authenticate_proxy(response)
        else:
            return

        if retry is None:
            logger.debug(
                "No supported authentication challenge",
                extra={"status": response.status_code, "url": str(request.url)},
            )
            return
        yield retry


class BearerTokenAuth(httpx.Auth):
    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers[headers.AUTHORIZATION] = f"Bearer {self._token}"
        yield request


def select_auth(config: Config) -> httpx.Auth | None:
    if config.has_basic_auth:
        logger.debug("Basic authentication enabled", extra={"username": config.username})
        return BasicChallengeAuth(config.username, config.password)

    if config.has_oauth_token:
        logger.debug("Bearer token authentication enabled")
        return BearerTokenAuth(config.oauth_token)

    logger.debug("No authentication configured")
    return None
