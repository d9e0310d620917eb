from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from valkey_demo.app import create_app
from valkey_demo.config import LoggingConfig, load_settings
from valkey_demo.errors import AppDirError

logger = logging.getLogger("valkey_demo")


def configure_logging(config: LoggingConfig) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_dir:
        log_dir = Path(config.log_dir).expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_dir / "valkey-demo.log",
                maxBytes=config.max_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )

    logging.basicConfig(
        level=config.level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def main() -> None:
    try:
        settings = load_settings()
    except ValidationError as exc:
        # Logging is configured from settings, so fall back to the defaults here.
        configure_logging(LoggingConfig())
        logger.critical("Invalid configuration: %s", exc)
        sys.exit(1)
    configure_logging(settings.logging)

    try:
        app = create_app(settings)
    except AppDirError:
        logger.critical("Cannot start without a static asset directory", exc_info=True)
        sys.exit(1)

    logger.info(f"Listening on :{settings.port}")
    uvicorn.run(app, host=settings.bind_host, port=settings.port)


if __name__ == "__main__":
    main()
