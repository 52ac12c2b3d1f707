# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0


class KubeClientError(Exception):
    """Base error for failures callers can act on."""

    @classmethod
    def launder(cls, error: BaseException) -> "KubeClientError":
        if isinstance(error, KubeClientError):
            return error
        wrapped = cls(f"An error has occurred: {error}")
        wrapped.__cause__ = error
        return wrapped


class ConfigurationError(KubeClientError):
    pass


class TLSUnavailableError(RuntimeError):
    """The runtime cannot create a TLS context at all.

    Not a KubeClientError: no configuration change can recover from it, so it
    must not be caught together with ordinary client errors.
    """
