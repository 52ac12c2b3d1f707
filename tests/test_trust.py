# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

import base64
import ssl
import tempfile
import types
from unittest.mock import MagicMock

import pytest

from kubetransport import trust
from kubetransport.config import Config
from kubetransport.errors import ConfigurationError, KubeClientError, TLSUnavailableError
from kubetransport.trust import accept_any_hostname, resolve_trust


def _b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


@pytest.mark.parametrize("host", ["api.example.com", "evil.example.org", "10.0.0.1", "", "*"])
@pytest.mark.parametrize("session", [None, MagicMock(spec=ssl.SSLSession)])
def test_trust_certs_accepts_every_hostname(host, session):
    policy = resolve_trust(Config(master_url="https://api.example.com", trust_certs=True))

    assert policy.hostname_verifier is accept_any_hostname
    assert policy.hostname_verifier(host, session) is True


def test_trust_certs_disables_verification():
    policy = resolve_trust(Config(trust_certs=True))

    assert isinstance(policy.ssl_context, ssl.SSLContext)
    assert policy.ssl_context.check_hostname is False
    assert policy.ssl_context.verify_mode == ssl.CERT_NONE
    assert policy.verify is policy.ssl_context


def test_default_leaves_platform_context():
    policy = resolve_trust(Config(master_url="https://api.example.com"))

    assert policy.ssl_context is None
    assert policy.hostname_verifier is None
    assert policy.verify is True


def test_missing_ca_file_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        resolve_trust(Config(ca_cert_file=str(tmp_path / "missing-ca.crt")))


def test_ca_data_must_be_base64():
    with pytest.raises(ConfigurationError, match="ca_cert_data"):
        resolve_trust(Config(ca_cert_data="not base64!"))


def test_ca_data_must_hold_a_certificate():
    with pytest.raises(ConfigurationError):
        resolve_trust(Config(ca_cert_data=_b64("not a certificate")))


def test_client_key_without_certificate():
    with pytest.raises(ConfigurationError, match="without a client certificate"):
        resolve_trust(Config(client_key_data=_b64("key")))


def test_invalid_client_certificate_data(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

    with pytest.raises(ConfigurationError, match="client certificate"):
        resolve_trust(
            Config(client_cert_data=_b64("not a cert"), client_key_data=_b64("not a key"))
        )

    # Inline material is written to temp files that must not outlive the load
    assert not list(tmp_path.iterdir())


def test_no_tls_support_is_fatal(monkeypatch):
    def no_tls(_protocol):
        raise ssl.SSLError("no TLS")

    fake_ssl = types.SimpleNamespace(
        SSLContext=no_tls,
        SSLError=ssl.SSLError,
        PROTOCOL_TLS_CLIENT=ssl.PROTOCOL_TLS_CLIENT,
    )
    monkeypatch.setattr(trust, "ssl", fake_ssl)

    with pytest.raises(TLSUnavailableError) as exc_info:
        resolve_trust(Config(trust_certs=True))

    assert not isinstance(exc_info.value, KubeClientError)
    assert isinstance(exc_info.value.__cause__, ssl.SSLError)


def _b64_file(path) -> str:
    return base64.b64encode(path.read_bytes()).decode()


class TestValidMaterial:
    def test_ca_file_is_trusted(self, pem_dir):
        policy = resolve_trust(Config(ca_cert_file=str(pem_dir / "client.crt")))

        context = policy.ssl_context
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname is True
        assert [c["subject"] for c in context.get_ca_certs()] == [
            ((("commonName", "kubetransport-test"),),)
        ]
        assert policy.hostname_verifier is None

    def test_ca_data_is_trusted(self, pem_dir):
        policy = resolve_trust(Config(ca_cert_data=_b64_file(pem_dir / "client.crt")))

        assert len(policy.ssl_context.get_ca_certs()) == 1
        assert policy.verify is policy.ssl_context

    def test_client_files_are_loaded(self, pem_dir):
        policy = resolve_trust(
            Config(
                client_cert_file=str(pem_dir / "client.crt"),
                client_key_file=str(pem_dir / "client.key"),
            )
        )

        assert isinstance(policy.ssl_context, ssl.SSLContext)

    def test_client_data_is_loaded_and_temp_files_removed(self, pem_dir, tmp_path, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

        policy = resolve_trust(
            Config(
                ca_cert_data=_b64_file(pem_dir / "client.crt"),
                client_cert_data=_b64_file(pem_dir / "client.crt"),
                client_key_data=_b64_file(pem_dir / "client.key"),
            )
        )

        assert isinstance(policy.ssl_context, ssl.SSLContext)
        assert not list(tmp_path.iterdir())

    def test_encrypted_key_with_passphrase(self, pem_dir):
        policy = resolve_trust(
            Config(
                client_cert_file=str(pem_dir / "client.crt"),
                client_key_file=str(pem_dir / "client-encrypted.key"),
                client_key_passphrase="secret",
            )
        )

        assert isinstance(policy.ssl_context, ssl.SSLContext)

    def test_wrong_passphrase(self, pem_dir):
        with pytest.raises(ConfigurationError, match="client certificate"):
            resolve_trust(
                Config(
                    client_cert_file=str(pem_dir / "client.crt"),
                    client_key_file=str(pem_dir / "client-encrypted.key"),
                    client_key_passphrase="wrong",
                )
            )

    def test_trust_certs_with_client_certificate(self, pem_dir):
        policy = resolve_trust(
            Config(
                trust_certs=True,
                client_cert_file=str(pem_dir / "client.crt"),
                client_key_file=str(pem_dir / "client.key"),
            )
        )

        assert policy.ssl_context.verify_mode == ssl.CERT_NONE
        assert policy.hostname_verifier("other.example.org", None) is True
