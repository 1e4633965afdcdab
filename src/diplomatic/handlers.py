from __future__ import annotations

import abc
import logging
import typing
from collections.abc import Mapping
from xml.etree.ElementTree import Element

from ._collections import TransportInfo
from .chain import FilterEntry, run_filters
from .exceptions import FilterTypeError
from .util import filters

__all__ = [
    "BasicHandler",
    "DecodingHandler",
    "HybridHandler",
    "JsonHandler",
    "ResponseHandler",
    "SelfHandling",
    "SimpleJsonHandler",
    "SimpleXmlHandler",
    "XmlHandler",
]

log = logging.getLogger(__name__)

_SelfT = typing.TypeVar("_SelfT", bound="ResponseHandler")


class ResponseHandler(abc.ABC):
    """
    Receives the response of a request, runs it through the registered
    filters and classifies it as errored, failed or successful.

    Exactly one of :meth:`was_errored`, :meth:`was_failed` and
    :meth:`was_successful` may be true once the handler is initialized.
    Subclasses must keep it that way.

    A handler can be reused for any number of sequential requests: every call
    to :meth:`initialize` replaces the state left by the previous one. It must
    not be shared between requests running at the same time.
    """

    def __init__(self) -> None:
        self.filters: list[FilterEntry] = []
        self._raw_response: typing.Any = None
        self._filtered_response: typing.Any = None
        self._http_version = ""
        self._headers: dict[str, str] = {}
        self._code: int | None = None
        self._info = TransportInfo()
        self._cli_call = ""

    @abc.abstractmethod
    def was_errored(self) -> bool:
        """Check to see if the response was errored."""

    @abc.abstractmethod
    def was_failed(self) -> bool:
        """Check to see if the response failed."""

    @abc.abstractmethod
    def was_successful(self) -> bool:
        """Check to see if the response was successful."""

    def filter(
        self: _SelfT, fn: typing.Callable[..., typing.Any], *args: typing.Any
    ) -> _SelfT:
        """
        Register a filter. Filters are applied in registration order every
        time the handler is initialized.

        :param fn:
            Receives the current value of the response as its first argument
            and ``args`` after it.
        """
        if not callable(fn):
            raise FilterTypeError(f"Filters must be callable, got {fn!r}")
        self.filters.append(FilterEntry(fn, args))
        return self

    def initialize(
        self,
        raw_response: typing.Any,
        http_version: str,
        headers: typing.Mapping[str, str],
        code: int | None,
        info: typing.Mapping[str, typing.Any] | None = None,
        cli_call: str = "",
    ) -> None:
        """
        Called by the client with the outcome of a request.

        :param raw_response:
            The response body, or a description of the transport error.
        :param http_version:
            The status line of the response, e.g. ``HTTP/1.1 200 OK``.
        :param code:
            The HTTP status code. ``0`` or ``None`` when no response was
            received at all.
        :param info:
            Diagnostics gathered by the transport.
        :param cli_call:
            The request written as an equivalent command line call.
        """
        self._raw_response = raw_response
        self._filtered_response = raw_response
        self._http_version = http_version
        self._headers = dict(headers)
        self._code = code
        self._info = TransportInfo(info or {})
        self._cli_call = cli_call
        self._filtered_response = run_filters(raw_response, self.filters)
        log.debug(
            "%r initialized through %d filter(s)", self, len(self.filters)
        )

    def get_cli_call(self) -> str:
        return self._cli_call

    def get_code(self) -> int | None:
        return self._code

    def get_filtered_response(self) -> typing.Any:
        return self._filtered_response

    def get_headers(self) -> dict[str, str]:
        return self._headers

    def get_http_version(self) -> str:
        return self._http_version

    def get_raw_response(self) -> typing.Any:
        return self._raw_response

    def info(self) -> TransportInfo:
        """Diagnostics of the transport for the last request."""
        return self._info

    cli_call = property(get_cli_call)
    code = property(get_code)
    filtered_response = property(get_filtered_response)
    headers = property(get_headers)
    http_version = property(get_http_version)
    raw_response = property(get_raw_response)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code={self._code!r})>"


class SelfHandling(abc.ABC):
    """
    A response handler that also implements this interface decides the
    result of a request by itself: the client calls the method matching the
    classification and returns its result, ignoring every callback registered
    on the client.
    """

    @abc.abstractmethod
    def on_error(self) -> typing.Any:
        """Invoked on an errored response."""

    @abc.abstractmethod
    def on_failure(self) -> typing.Any:
        """Invoked on a failed response."""

    @abc.abstractmethod
    def on_success(self) -> typing.Any:
        """Invoked on a successful response."""


def _is_transport_error(code: int | None) -> bool:
    # no status at all means the request never completed
    return not code or code >= 500


class BasicHandler(ResponseHandler):
    """
    Classifies responses by their status code alone.

    * errored: no status code, or a 5xx;
    * failed: any other status of 300 and above;
    * successful: everything else.
    """

    def was_errored(self) -> bool:
        return _is_transport_error(self._code)

    def was_failed(self) -> bool:
        if self.was_errored():
            return False
        return typing.cast(int, self._code) >= 300

    def was_successful(self) -> bool:
        return not self.was_errored() and not self.was_failed()


class _DecodeSensing:
    _raw_response: typing.Any
    _filtered_response: typing.Any

    def was_decoded(self) -> bool:
        """
        Decode filters hand back the very object they were given when they
        cannot parse it, so an untouched response was not decodable.
        """
        return self._filtered_response is not self._raw_response


class DecodingHandler(_DecodeSensing, ResponseHandler):
    """
    Classifies responses by the outcome of decoding them.

    * errored: the registered decode filters left the response untouched;
    * failed: the decoded document carries :attr:`failure_field`;
    * successful: everything else.

    Subclasses register their decode filter in ``__init__``.
    """

    #: Name of the field whose presence marks a failed response.
    failure_field = "Message"

    def has_failure_field(self) -> bool:
        document = self._filtered_response
        if isinstance(document, Element):
            return document.find(self.failure_field) is not None
        if isinstance(document, Mapping):
            return self.failure_field in document
        return False

    def was_errored(self) -> bool:
        return not self.was_decoded()

    def was_failed(self) -> bool:
        if self.was_errored():
            return False
        return self.has_failure_field()

    def was_successful(self) -> bool:
        return not self.was_errored() and not self.was_failed()


class JsonHandler(DecodingHandler):
    def __init__(self) -> None:
        super().__init__()
        self.filter(filters.json)


class XmlHandler(DecodingHandler):
    def __init__(self) -> None:
        super().__init__()
        self.filter(filters.xml)


class HybridHandler(_DecodeSensing, ResponseHandler):
    """
    Classifies responses by both decoding and status code.

    * errored: the response could not be decoded, there was no status code,
      or the status is a 5xx;
    * failed: any other status of 300 and above;
    * successful: everything else.
    """

    def was_errored(self) -> bool:
        return not self.was_decoded() or _is_transport_error(self._code)

    def was_failed(self) -> bool:
        if self.was_errored():
            return False
        return typing.cast(int, self._code) >= 300

    def was_successful(self) -> bool:
        return not self.was_errored() and not self.was_failed()


class SimpleJsonHandler(HybridHandler):
    def __init__(self) -> None:
        super().__init__()
        self.filter(filters.json)


class SimpleXmlHandler(HybridHandler):
    def __init__(self) -> None:
        super().__init__()
        self.filter(filters.xml)
