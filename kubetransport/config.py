# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from kubetransport.constants import DEFAULT_TIMEOUT_SECONDS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="KUBETRANSPORT_",
        env_file=".env",
        case_sensitive=False,
        extra="allow",
    )

    # Logging
    log_level: str = "INFO"
    http_trace: bool = False

    # Applied to every timeout the connection config leaves unset
    default_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


settings = Settings()


class Config(BaseModel):
    """Connection settings for one API server.

    Populated by whoever reads kubeconfig files or the environment; this
    package only consumes it. Timeouts are in milliseconds and anything
    ``<= 0`` keeps the transport default. ``*_data`` fields hold
    base64-encoded PEM, the same encoding kubeconfig uses.
    """

    model_config = ConfigDict(frozen=True)

    master_url: str = ""
    trust_certs: bool = False

    # Trust material
    ca_cert_file: str | None = None
    ca_cert_data: str | None = None

    # Key material
    client_cert_file: str | None = None
    client_cert_data: str | None = None
    client_key_file: str | None = None
    client_key_data: str | None = None
    client_key_passphrase: str | None = None

    username: str | None = None
    password: str | None = None
    oauth_token: str | None = None

    connection_timeout: int = 0
    request_timeout: int = 0

    http_proxy: str | None = None
    https_proxy: str | None = None
    no_proxy: tuple[str, ...] = ()

    @property
    def has_trust_material(self) -> bool:
        return bool(self.ca_cert_file or self.ca_cert_data)

    @property
    def has_key_material(self) -> bool:
        return bool(
            self.client_cert_file
            or self.client_cert_data
            or self.client_key_file
            or self.client_key_data
        )

    @property
    def has_basic_auth(self) -> bool:
        return bool(self.username) and bool(self.password)

    @property
    def has_oauth_token(self) -> bool:
        return bool(self.oauth_token)
