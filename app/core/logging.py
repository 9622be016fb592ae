"""Logging configuration."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once per process.

    Uvicorn installs its own handlers; ours only go on the root logger.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(getattr(handler, "_garden", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._garden = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # SQL echo is noisy; keep it behind DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level.upper() == "DEBUG" else logging.WARNING
    )
