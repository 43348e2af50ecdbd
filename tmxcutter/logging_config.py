"""
Logging for tmxcutter.

Only the ``tmxcutter`` logger is configured, so embedding applications keep
their own root logging setup. Log records go to stderr; the CLI's summary
goes to stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = 'tmxcutter'

BRIEF_FORMAT = '%(levelname)s %(module)s: %(message)s'
DEBUG_FORMAT = '%(asctime)s %(levelname)-7s %(name)s:%(lineno)d %(message)s'

# Marks handlers installed by setup_logging so a second call replaces them
_HANDLER_TAG = '_tmxcutter_handler'


def _level_for(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """
    Attach handlers to the ``tmxcutter`` logger for one run.

    Args:
        verbose: Show INFO messages (pipeline milestones)
        debug: Show DEBUG messages (one line per tile) with timestamps
        log_file: Also write every record at the chosen level to this file

    Returns:
        The ``tmxcutter`` logger
    """
    level = _level_for(verbose, debug)
    formatter = logging.Formatter(DEBUG_FORMAT if debug else BRIEF_FORMAT)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a tmxcutter module, e.g. ``get_logger('planner')``."""
    if name:
        return logging.getLogger(f'{LOGGER_NAME}.{name}')
    return logging.getLogger(LOGGER_NAME)
