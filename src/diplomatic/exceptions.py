from __future__ import annotations

import typing

# Base Exceptions


class DiplomaticError(Exception):
    """Base exception used by this module."""

    pass


class ConfigurationError(DiplomaticError):
    """Raised when a client or a response handler is set up incorrectly.

    These are always raised at registration time, before any request is
    attempted.
    """

    pass


# Leaf Exceptions


class DestinationValueError(ValueError, ConfigurationError):
    """Raised when a destination has no host to send requests to."""

    def __init__(self, destination: typing.Any) -> None:
        self.destination = destination
        super().__init__(
            "Invalid argument. Expected destination with a minimum of host and "
            "optionally a scheme, path and/or port. Received: %r" % (destination,)
        )

    def __reduce__(self) -> tuple[typing.Callable[..., object], tuple[object, ...]]:
        # For pickling purposes.
        return self.__class__, (self.destination,)


class HandlerTypeError(TypeError, ConfigurationError):
    """Raised when something other than a ResponseHandler is given to a client."""

    pass


class FilterTypeError(TypeError, ConfigurationError):
    """Raised when a filter that cannot be called is registered."""

    pass


class UploadValueError(ValueError, ConfigurationError):
    """Raised when a file to upload cannot be found or described."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

    def __reduce__(self) -> tuple[typing.Callable[..., object], tuple[object, ...]]:
        # For pickling purposes.
        return self.__class__, (self.field, self.message)


# Filter control signals. These are flow control for the filter chain, not
# errors, and never leave ResponseHandler.initialize().


class FilterSignal(Exception):
    """Base class of the signals a filter may raise to steer the chain."""

    pass


class Interrupt(FilterSignal):
    """Stop applying filters. The last computed value is kept."""

    pass


class InterruptContinue(FilterSignal):
    """Skip the next ``count`` filters of the chain."""

    def __init__(self, count: int) -> None:
        self.count = int(count)
        super().__init__(self.count)

    def __reduce__(self) -> tuple[typing.Callable[..., object], tuple[object, ...]]:
        # For pickling purposes.
        return self.__class__, (self.count,)
