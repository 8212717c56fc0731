"""Run the notion2view API with ``python -m server``."""

from __future__ import annotations

import os

import uvicorn

from notion2view.utils.logging_config import configure_logging, get_logger


def main() -> None:
    """Serve ``server.main:app`` on ``HOST``/``PORT``.

    Logging is configured before uvicorn starts so its loggers share the
    application's handler and format.
    """
    configure_logging()
    logger = get_logger("server")

    host = os.getenv("HOST", "0.0.0.0")  # noqa: S104
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false").lower() == "true"

    logger.info("Starting notion2view server", extra={"host": host, "port": port, "reload": reload})
    uvicorn.run("server.main:app", host=host, port=port, reload=reload, log_config=None)


if __name__ == "__main__":
    main()
