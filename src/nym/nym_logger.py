"""
Logger used throughout nym.
"""

import logging


class NymLogger:
    """
    Thin wrapper around a stdlib logger so components log with a single call.
    """

    def __init__(self, name: str = "nym") -> None:
        self.logger = logging.getLogger(name)

    def log(self, debug_message: str, level: int) -> None:
        """
        Log the debug message at the given level.
        """
        self.logger.log(level=level, msg=debug_message)


def configure_logging(verbosity: int = 0) -> None:
    """
    Configure the root handler for command-line use.

    0 shows warnings only, 1 adds INFO, 2 and above adds DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
    )
    logging.getLogger("nym").setLevel(level)
