"""Entry point so `python -m smokecheck` starts the server.

Equivalent to running `uvicorn smokecheck.main:app --port 4567`, with host and
port taken from the environment (see `smokecheck.config`).
"""

import logging

import uvicorn

from .config import settings

logger = logging.getLogger("smokecheck.server")


def main() -> None:
    try:
        uvicorn.run(
            "smokecheck.main:app",
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        # uvicorn re-raises the captured SIGINT once shutdown has finished.
        logger.info("Server stopped", extra={"event": "shutdown"})


if __name__ == "__main__":
    main()
