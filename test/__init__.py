from __future__ import annotations

import typing

from diplomatic.handlers import ResponseHandler, SelfHandling


class Handler(ResponseHandler):
    """
    Classifies by the filtered response itself: ``"Error"`` is errored,
    ``"Failed"`` is failed, anything else is successful.
    """

    def was_errored(self) -> bool:
        return bool(self.get_filtered_response() == "Error")

    def was_failed(self) -> bool:
        return bool(self.get_filtered_response() == "Failed")

    def was_successful(self) -> bool:
        return not self.was_errored() and not self.was_failed()


class SelfHandler(Handler, SelfHandling):
    def on_error(self) -> typing.Any:
        return "WasErrored"

    def on_failure(self) -> typing.Any:
        return "WasFailed"

    def on_success(self) -> typing.Any:
        return "WasSuccessful"


def initialized(
    handler: ResponseHandler, raw_response: typing.Any = "Successful", code: int | None = 200
) -> ResponseHandler:
    """Initialize ``handler`` the way a client would, without a request."""
    handler.initialize(raw_response, "HTTP/1.1", {}, code, {}, "")
    return handler
