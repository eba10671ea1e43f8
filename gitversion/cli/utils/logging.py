import logging
import sys


logger = logging.getLogger("gitversion")


def configure_logging(debug: bool):
    """
    Set the gitversion log level and attach a stderr handler once.

    Stdout carries only command output, e.g. the json version variables.
    """
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if logger.hasHandlers():
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
