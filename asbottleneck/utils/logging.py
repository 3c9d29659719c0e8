# asbottleneck/utils/logging.py

from __future__ import annotations
import logging

ROOT_LOGGER = "asbottleneck"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger inside the asbottleneck hierarchy.

    Modules call this with ``__name__``, which already starts with the
    package name; anything else is nested under it.
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(verbosity: int = 0) -> logging.Logger:
    """
    Attach a single stderr handler to the package logger.

    verbosity 0 -> WARNING, 1 -> INFO, 2+ -> DEBUG. Calling it again replaces
    the handler, so it writes to the current sys.stderr.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    for old in list(root.handlers):
        root.removeHandler(old)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return root
