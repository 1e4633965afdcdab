from __future__ import annotations

import codecs
import logging
import time
import typing
from types import TracebackType

import urllib3
from urllib3 import PoolManager
from urllib3.exceptions import HTTPError
from urllib3.filepost import encode_multipart_formdata
from urllib3.util import Timeout

from ._version import __version__
from .dispatch import CallbackDispatcher
from .exceptions import HandlerTypeError
from .handlers import BasicHandler, ResponseHandler
from .util.curl import build_cli_call
from .util.destination import normalize_destination
from .util.form import UploadFile, encode_urlencoded, flatten_fields, process_files

__all__ = ["Client"]

log = logging.getLogger(__name__)

_SelfT = typing.TypeVar("_SelfT", bound="Client")

DEFAULT_USER_AGENT = f"diplomatic/{__version__} urllib3/{urllib3.__version__}"
DEFAULT_TIMEOUT = Timeout(connect=10.0, read=30.0)

_TYPE_DATA = typing.Union[typing.Mapping[str, typing.Any], typing.Sequence[typing.Any]]
_TYPE_FILES = typing.Mapping[str, typing.Any]
_TYPE_RESPONSE_HANDLER = typing.Union[
    ResponseHandler, typing.Type[ResponseHandler], None
]

_HTTP_VERSIONS = {9: "HTTP/0.9", 10: "HTTP/1.0", 11: "HTTP/1.1", 20: "HTTP/2", 30: "HTTP/3"}


def _charset(content_type: str, default: str = "utf-8") -> str:
    for param in content_type.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset":
            charset = value.strip().strip("\"'")
            try:
                return codecs.lookup(charset).name
            except LookupError:
                break
    return default


def _status_line(response: urllib3.BaseHTTPResponse) -> str:
    version = _HTTP_VERSIONS.get(response.version, "HTTP/1.1")
    return f"{version} {response.status} {response.reason or ''}".rstrip()


class Client(CallbackDispatcher):
    """
    Sends requests to a single destination and hands every response to a
    :class:`~diplomatic.handlers.ResponseHandler`, then to the callback
    registered for its outcome.

    :param destination:
        Host and, optionally, scheme, port and base path, e.g.
        ``api.example.com:8443/v2``. The scheme defaults to ``https``.

    :param response_handler:
        A response handler instance, a response handler class to instantiate,
        or ``None`` for a :class:`~diplomatic.handlers.BasicHandler`.

    :param user_agent:
        Sent as the User-Agent header of every request.

    :param headers:
        Headers sent with every request.

    :param timeout:
        A :class:`urllib3.util.Timeout` or a number of seconds.

    :param use_creators:
        Whether the callables registered with :meth:`add_creator` are applied
        to this client.

    :param \\**pool_kwargs:
        Passed to the :class:`urllib3.PoolManager` that performs the requests,
        e.g. ``ca_certs`` or ``maxsize``.

    Example:

    .. code-block:: python

        import diplomatic

        client = diplomatic.Client("api.example.com", diplomatic.SimpleJsonHandler)
        user = (
            client.on_success(lambda handler: handler.get_filtered_response())
            .on_any(None)
            .get("/users/1")
        )
    """

    _creators: typing.ClassVar[list[typing.Callable[[Client], typing.Any]]] = []

    def __init__(
        self,
        destination: str,
        response_handler: _TYPE_RESPONSE_HANDLER = None,
        *,
        user_agent: str | None = None,
        headers: typing.Mapping[str, str] | None = None,
        timeout: Timeout | float | None = DEFAULT_TIMEOUT,
        use_creators: bool = True,
        **pool_kwargs: typing.Any,
    ) -> None:
        super().__init__()
        self.set_destination(destination)
        self.set_response_handler(response_handler)
        self.headers: dict[str, str] = dict(headers or {})
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout
        self.is_insecure = False
        self.is_multipart = False
        self.pool_kwargs = pool_kwargs

        self._pools: dict[bool, PoolManager] = {}
        self._cli_call: str | None = None
        self._code: int | None = None

        if use_creators:
            for creator in list(self._creators):
                creator(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}({self.destination!r})>"

    def __enter__(self: _SelfT) -> _SelfT:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> typing.Literal[False]:
        self.close()
        # Return False to re-raise any potential exceptions
        return False

    def close(self) -> None:
        """
        Close all pooled connections.
        """
        for pool_manager in self._pools.values():
            pool_manager.clear()
        self._pools.clear()

    @classmethod
    def add_creator(cls, creator: typing.Callable[[Client], typing.Any]) -> None:
        """
        Register a callable applied to every new client, to set up common
        headers, callbacks or filters in one place.
        """
        cls._creators.append(creator)

    @classmethod
    def clear_creators(cls) -> None:
        del cls._creators[:]

    # Configuration

    def add_headers(self: _SelfT, headers: typing.Mapping[str, str]) -> _SelfT:
        """Add headers to the ones sent with every request."""
        self.headers.update(headers)
        return self

    def set_headers(self: _SelfT, headers: typing.Mapping[str, str]) -> _SelfT:
        """Replace the headers sent with every request."""
        self.headers = {}
        return self.add_headers(headers)

    def insecure(self: _SelfT, is_insecure: bool = True) -> _SelfT:
        """Skip the verification of TLS certificates and hostnames."""
        self.is_insecure = bool(is_insecure)
        return self

    def set_destination(self: _SelfT, destination: str) -> _SelfT:
        self.destination = normalize_destination(destination)
        return self

    def set_multipart(self: _SelfT, is_multipart: bool = True) -> _SelfT:
        """
        Send request data as multipart/form-data instead of
        application/x-www-form-urlencoded.
        """
        self.is_multipart = bool(is_multipart)
        return self

    def set_response_handler(
        self: _SelfT, response_handler: _TYPE_RESPONSE_HANDLER
    ) -> _SelfT:
        if response_handler is None:
            response_handler = BasicHandler()
        elif isinstance(response_handler, type) and issubclass(
            response_handler, ResponseHandler
        ):
            response_handler = response_handler()

        if not isinstance(response_handler, ResponseHandler):
            raise HandlerTypeError(
                f"Expected a ResponseHandler instance or subclass, got {response_handler!r}"
            )
        self.response_handler = response_handler
        return self

    def set_user_agent(self: _SelfT, user_agent: str) -> _SelfT:
        self.user_agent = str(user_agent)
        return self

    # Outcome of the last request

    @property
    def cli_call(self) -> str | None:
        """The last request written as an equivalent ``curl`` call."""
        return self._cli_call

    @property
    def code(self) -> int | None:
        """The status code of the last response, ``0`` on transport errors."""
        return self._code

    @property
    def http_version(self) -> str:
        return self.response_handler.get_http_version()

    @property
    def raw_response(self) -> typing.Any:
        return self.response_handler.get_raw_response()

    @property
    def response_headers(self) -> dict[str, str]:
        return self.response_handler.get_headers()

    # Requests

    def delete(self, page: str, data: _TYPE_DATA | None = None) -> typing.Any:
        return self.request("DELETE", page, data)

    def get(self, page: str, data: _TYPE_DATA | None = None) -> typing.Any:
        return self.request("GET", page, data)

    def head(self, page: str) -> typing.Any:
        return self.request("HEAD", page)

    def options(self, page: str) -> typing.Any:
        return self.request("OPTIONS", page)

    def patch(
        self, page: str, data: _TYPE_DATA | None = None, files: _TYPE_FILES | None = None
    ) -> typing.Any:
        return self.request("PATCH", page, data, files)

    def post(
        self, page: str, data: _TYPE_DATA | None = None, files: _TYPE_FILES | None = None
    ) -> typing.Any:
        return self.request("POST", page, data, files)

    def put(
        self, page: str, data: _TYPE_DATA | None = None, files: _TYPE_FILES | None = None
    ) -> typing.Any:
        return self.request("PUT", page, data, files)

    def trace(
        self, page: str, data: _TYPE_DATA | None = None, files: _TYPE_FILES | None = None
    ) -> typing.Any:
        return self.request("TRACE", page, data, files)

    def request(
        self,
        method: str,
        page: str,
        data: _TYPE_DATA | None = None,
        files: _TYPE_FILES | None = None,
    ) -> typing.Any:
        """
        Send a request to ``page`` on the destination, initialize the response
        handler with the response and dispatch it.

        GET data is sent as the query string. HEAD and OPTIONS send no data.
        Every other method sends it as the body, multipart encoded when files
        are given or :meth:`set_multipart` is on.

        :return:
            Whatever the dispatched callback returns, or the client itself
            when no callback applies.
        """
        method = method.upper()
        uploads = process_files(files) if files else []
        multipart = self.is_multipart or bool(uploads)

        url = self.destination + page
        body: bytes | None = None
        url_body: str | None = None
        fields: list[tuple[str, typing.Any]] | None = None
        headers = {"User-Agent": self.user_agent}
        headers.update(self.headers)

        if method == "GET":
            query = encode_urlencoded(data)
            if query:
                url += "?" + query
        elif method in ("HEAD", "OPTIONS"):
            pass
        elif multipart:
            fields = [*uploads, *flatten_fields(data or {})]
            if fields:
                body, headers["Content-Type"] = encode_multipart_formdata(
                    [
                        (name, value.as_field() if isinstance(value, UploadFile) else value)
                        for name, value in fields
                    ]
                )
        else:
            url_body = encode_urlencoded(data)
            if url_body:
                body = url_body.encode("utf-8")
                headers["Content-Type"] = "application/x-www-form-urlencoded"

        self._cli_call = build_cli_call(
            method,
            url,
            user_agent=self.user_agent,
            headers=self.headers,
            body=url_body,
            fields=fields,
            insecure=self.is_insecure,
        )

        raw_response, http_version, response_headers, code, info = self._urlopen(
            method, url, body, headers
        )
        self._code = code

        self.response_handler.initialize(
            raw_response, http_version, response_headers, code, info, self._cli_call
        )
        return self.dispatch(self.response_handler)

    def _pool_manager(self) -> PoolManager:
        pool_manager = self._pools.get(self.is_insecure)
        if pool_manager is None:
            pool_kwargs = dict(self.pool_kwargs)
            if self.is_insecure:
                pool_kwargs.update(cert_reqs="CERT_NONE", assert_hostname=False)
            pool_manager = self._pools[self.is_insecure] = PoolManager(**pool_kwargs)
        return pool_manager

    def _urlopen(
        self,
        method: str,
        url: str,
        body: bytes | None,
        headers: dict[str, str],
    ) -> tuple[str, str, dict[str, str], int, dict[str, typing.Any]]:
        info: dict[str, typing.Any] = {
            "method": method,
            "url": url,
            "request_headers": headers,
            "insecure": self.is_insecure,
            "error": None,
        }

        log.debug("Starting new %s request to %s", method, url)
        started = time.monotonic()
        try:
            response = self._pool_manager().request(
                method,
                url,
                body=body,
                headers=headers,
                redirect=False,
                retries=False,
                timeout=self.timeout,
                preload_content=True,
            )
        except HTTPError as e:
            info["elapsed"] = time.monotonic() - started
            info["error"] = e
            info["http_code"] = 0
            log.warning("%s %s failed: %r", method, url, e)
            return str(e), "", {}, 0, info

        info["elapsed"] = time.monotonic() - started
        info["http_code"] = response.status
        info["reason"] = response.reason
        info["content_type"] = response.headers.get("Content-Type")
        info["size_download"] = len(response.data)

        http_version = _status_line(response)
        info["http_version"] = http_version
        log.debug('"%s %s" %s %s', method, url, response.status, len(response.data))

        response_headers = {name: response.headers[name] for name in response.headers}
        charset = _charset(response.headers.get("Content-Type", ""))
        raw_response = response.data.decode(charset, "replace")
        return raw_response, http_version, response_headers, response.status, info
