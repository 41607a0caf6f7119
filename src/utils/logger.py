import logging
import os

from rich.logging import RichHandler

LOG_FORMAT = "[%(name)s]  %(message)s"


class CenteredFormatter(logging.Formatter):
    """
    Pads logger names to the widest name seen so far, so messages line up.
    """

    name_width = 12

    def format(self, record):
        CenteredFormatter.name_width = max(CenteredFormatter.name_width, len(record.name))
        record.name = record.name.center(CenteredFormatter.name_width)
        return super().format(record)


def _level() -> int:
    return logging.DEBUG if os.getenv("DEBUG") else logging.INFO


def get_logger(name=None) -> logging.Logger:
    """
    Return a logger for `name` writing through a RichHandler.

    Handlers are attached once per name; DEBUG in the environment lowers the
    level for every logger created afterwards.
    """
    logger = logging.getLogger(name or "storefront")
    level = _level()
    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(CenteredFormatter(LOG_FORMAT))
        handler.setLevel(level)
        logger.addHandler(handler)
        logger.propagate = False
        logger.debug(f"Logger '{logger.name}' ready.")

    return logger
