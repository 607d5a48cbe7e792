"""Launch the relay with uvicorn."""
from __future__ import annotations
import logging
import sys

import uvicorn

from ai_relay.common.config import load_settings
from ai_relay.common.errors import ConfigError
from ai_relay.common.logging_setup import setup_logging
from ai_relay.serve.client import build_client
from ai_relay.serve.fastapi_app import create_app

LOGGER = logging.getLogger("ai_relay.serve.server")

def main() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        setup_logging()
        LOGGER.error("Error: %s", e)
        sys.exit(1)

    setup_logging(settings.log_level)
    try:
        client = build_client(settings)
    except ConfigError as e:
        LOGGER.error("Error: %s", e)
        sys.exit(1)

    app = create_app(client=client, settings=settings)
    LOGGER.info("Backend server listening at http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)

if __name__ == "__main__":
    main()
