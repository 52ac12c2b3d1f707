# Copyright 2026 The OpenChoreo Authors
# SPDX-License-Identifier: Apache-2.0

import logging
import sys

from kubetransport.config import settings

# Below DEBUG; wire-level request/response tracing only
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

TRACE_LOGGER_NAME = "kubetransport.tracing"


def setup_logging():
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        force=True,
    )

    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    # Request/response tracing is only attached to clients built while this is on
    if settings.http_trace:
        logging.getLogger(TRACE_LOGGER_NAME).setLevel(TRACE)
