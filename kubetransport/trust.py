# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

"""TLS trust policy for API server connections."""

import base64
import binascii
import logging
import os
import ssl
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from kubetransport.config import Config
from kubetransport.errors import ConfigurationError, TLSUnavailableError

logger = logging.getLogger(__name__)

HostnameVerifier = Callable[[str, ssl.SSLSession | None], bool]


def accept_any_hostname(_host: str, _session: ssl.SSLSession | None) -> bool:
    """Accept every presented host name. Development and test clusters only."""
    return True


@dataclass(frozen=True)
class TrustPolicy:
    ssl_context: ssl.SSLContext | None = None
    hostname_verifier: HostnameVerifier | None = None

    @property
    def verify(self) -> ssl.SSLContext | bool:
        """Value for httpx's ``verify`` argument."""
        if self.ssl_context is None:
            return True
        return self.ssl_context


def resolve_trust(config: Config) -> TrustPolicy:
    hostname_verifier = accept_any_hostname if config.trust_certs else None

    if not (config.has_key_material or config.has_trust_material or config.trust_certs):
        return TrustPolicy(hostname_verifier=hostname_verifier)

    context = _new_context()
    if config.has_trust_material:
        _load_trust_material(context, config)
    else:
        context.load_default_certs(ssl.Purpose.SERVER_AUTH)

    if config.has_key_material:
        _load_key_material(context, config)

    if config.trust_certs:
        logger.warning(
            "Certificate and hostname verification disabled",
            extra={"master_url": config.master_url},
        )
        # check_hostname must be off before verify_mode can drop to CERT_NONE
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    return TrustPolicy(ssl_context=context, hostname_verifier=hostname_verifier)


def _new_context() -> ssl.SSLContext:
    try:
        return ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except (ssl.SSLError, ValueError, OSError) as e:
        logger.critical("Unable to create a TLS context", extra={"error": str(e)})
        raise TLSUnavailableError("The runtime has no usable TLS support") from e


def _decode_pem(data: str, field: str) -> str:
    try:
        return base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ConfigurationError(f"{field} is not valid base64-encoded PEM") from e


def _load_trust_material(context: ssl.SSLContext, config: Config) -> None:
    try:
        if config.ca_cert_file:
            context.load_verify_locations(cafile=config.ca_cert_file)
        if config.ca_cert_data:
            context.load_verify_locations(cadata=_decode_pem(config.ca_cert_data, "ca_cert_data"))
    except (ssl.SSLError, OSError) as e:
        raise ConfigurationError(f"Unable to load CA certificates: {e}") from e

    logger.debug("Loaded custom CA certificates")


@contextmanager
def _pem_file(data: str, field: str) -> Iterator[str]:
    """Write decoded PEM data to a private temp file for the duration of a load."""
    pem = _decode_pem(data, field)
    fd, path = tempfile.mkstemp(suffix=".pem")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(pem)
        yield path
    finally:
        os.unlink(path)


@contextmanager
def _material_path(path: str | None, data: str | None, field: str) -> Iterator[str | None]:
    if path:
        yield path
    elif data:
        with _pem_file(data, field) as tmp_path:
            yield tmp_path
    else:
        yield None


def _load_key_material(context: ssl.SSLContext, config: Config) -> None:
    if not (config.client_cert_file or config.client_cert_data):
        raise ConfigurationError("A client key was configured without a client certificate")

    try:
        with (
            _material_path(config.client_cert_file, config.client_cert_data, "client_cert_data") as certfile,
            _material_path(config.client_key_file, config.client_key_data, "client_key_data") as keyfile,
        ):
            context.load_cert_chain(
                certfile=certfile,
                keyfile=keyfile,
                password=config.client_key_passphrase,
            )
    except (ssl.SSLError, OSError) as e:
        raise ConfigurationError(f"Unable to load client certificate: {e}") from e

    logger.debug("Loaded client certificate")
