import logging
import sys

logger = logging.getLogger("rapidllm")
logger.addHandler(logging.NullHandler())


def configure_logging(verbose: bool = False) -> None:
    """Route package logs to stderr, at DEBUG when `verbose` is set."""
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("rlm: %(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
