"""
Logging setup. Every module logs through logging.getLogger(__name__).
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once per process."""
    global _configured
    if _configured:
        return
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # httpx logs every backend request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
