"""Logging setup for the chat application process."""

import logging
import os
from logging.handlers import RotatingFileHandler


def setup_logging(dev_mode: bool = False, logs_dir: str = "logs") -> None:
    """Set up logging for the chat application process."""
    dt_fmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("[{asctime}] [{levelname:<8}] {name}: {message}", dt_fmt, style="{")

    logging.root.setLevel(logging.DEBUG if dev_mode else logging.INFO)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logging.root.addHandler(stream_handler)

    if dev_mode:
        # See https://github.com/sqlalchemy/sqlalchemy/discussions/10302
        logging.getLogger("sqlalchemy.engine.Engine").handlers = [logging.NullHandler()]  # Avoid duplicate logging

    os.makedirs(logs_dir, exist_ok=True)
    file_handler = RotatingFileHandler(
        filename=os.path.join(logs_dir, "chatapp.log"),
        encoding="utf-8",
        maxBytes=32 * 1024 * 1024,  # 32 MiB
        backupCount=5,  # Rotate through 5 files
    )
    file_handler.setFormatter(formatter)
    logging.getLogger("chatapp").addHandler(file_handler)
