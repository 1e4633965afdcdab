"""
HTTP client that runs every response through a chain of filters, classifies
it as errored, failed or successful and answers with the callback registered
for that outcome
"""

from __future__ import annotations

# Set default logging handler to avoid "No handler found" warnings.
import logging
import typing
from logging import NullHandler

from . import exceptions
from ._collections import TransportInfo
from ._version import __version__
from .chain import Abort, Continue, SkipNext
from .client import Client
from .exceptions import Interrupt, InterruptContinue
from .handlers import (
    BasicHandler,
    DecodingHandler,
    HybridHandler,
    JsonHandler,
    ResponseHandler,
    SelfHandling,
    SimpleJsonHandler,
    SimpleXmlHandler,
    XmlHandler,
)
from .util import filters

__license__ = "MIT"
__version__ = __version__

__all__ = (
    "Abort",
    "BasicHandler",
    "Client",
    "Continue",
    "DecodingHandler",
    "HybridHandler",
    "Interrupt",
    "InterruptContinue",
    "JsonHandler",
    "ResponseHandler",
    "SelfHandling",
    "SimpleJsonHandler",
    "SimpleXmlHandler",
    "SkipNext",
    "TransportInfo",
    "XmlHandler",
    "add_stderr_logger",
    "exceptions",
    "filters",
)

logging.getLogger(__name__).addHandler(NullHandler())


def add_stderr_logger(
    level: int = logging.DEBUG,
) -> logging.StreamHandler[typing.TextIO]:
    """
    Helper for quickly adding a StreamHandler to the logger. Useful for
    debugging.

    Returns the handler after adding it.
    """
    # This method needs to be in this __init__.py to get the __name__ correct
    # even if diplomatic is vendored within another package.
    logger = logging.getLogger(__name__)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.debug("Added a stderr logging handler to logger: %s", __name__)
    return handler


# ... Clean up.
del NullHandler
