#!/usr/bin/env python3
"""Entry point: run the EkoSim status server on 0.0.0.0:3000. Takes no arguments.

A bind failure (port in use, bad address) is fatal: logged and the process exits with status 1."""

import logging
import os
import sys

# Project root: always resolve relative to script location, not cwd
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)

logger = logging.getLogger("run_server")


def main() -> int:
    from src.config.settings import get_server_config
    from src.core.errors import BindError
    from src.core.logging_utils import setup_logging
    from servers.app import run_server

    setup_logging(get_server_config()["log_level"])
    try:
        run_server()
    except BindError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
