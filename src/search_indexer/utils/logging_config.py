"""Logging setup for the indexer CLI - everything goes to stderr."""

import logging
import sys

PACKAGE_LOGGER = "search_indexer"

# Chatty libraries that log every HTTP request or model load at INFO
NOISY_LOGGERS = ("urllib3", "chromadb", "sentence_transformers", "httpx")


def setup_logging(verbose: bool = False, debug: bool = False):
    """
    Configure stderr logging for a CLI run.

    Args:
        verbose: INFO for the root logger instead of ERROR
        debug: Also show per-page DEBUG messages from this package
    """
    level = logging.INFO if verbose or debug else logging.ERROR
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if debug else logging.NOTSET)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
