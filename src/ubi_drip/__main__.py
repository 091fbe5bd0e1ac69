"""Command-line entry point: ``python -m ubi_drip`` or ``ubi-drip``.

Configures logging from :class:`~ubi_drip.config.AppConfig` and serves
:data:`ubi_drip.api.main.app` with uvicorn on the configured host and port.
"""

from __future__ import annotations

import logging

import uvicorn

from ubi_drip.config import get_config

logger = logging.getLogger(__name__)

#: The module-level application uvicorn imports once logging is configured.
APP_IMPORT_PATH = "ubi_drip.api.main:app"


def main() -> None:
    """Run the UBI Drip server until interrupted."""
    settings = get_config()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("UBI Drip running on port %d", settings.port)
    uvicorn.run(
        APP_IMPORT_PATH,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
