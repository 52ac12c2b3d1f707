# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

from pathlib import Path

import pytest


@pytest.fixture
def master_url() -> str:
    return "https://api.example.com:6443"


DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def pem_dir() -> Path:
    """Self-signed CA certificate that doubles as a client certificate."""
    return DATA_DIR
