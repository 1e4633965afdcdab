from __future__ import annotations

import typing

from urllib3.exceptions import LocationParseError
from urllib3.util import parse_url

from ..exceptions import DestinationValueError

__all__ = ["normalize_destination"]

DEFAULT_SCHEME = "https"


def normalize_destination(destination: typing.Any) -> str:
    """
    Normalize the destination a client sends its requests to.

    A host is required. The scheme defaults to ``https``; the port and path
    are kept when given. Query strings, fragments and credentials are
    dropped, as is a trailing slash on the path, so pages can be appended
    directly.

    .. code-block:: python

        >>> normalize_destination("example.com:8080/api/")
        'https://example.com:8080/api'
        >>> normalize_destination("http://localhost")
        'http://localhost'
    """
    if not isinstance(destination, str):
        raise DestinationValueError(destination)

    url = destination.strip()
    # "localhost:8080" would otherwise read as scheme "localhost"
    if "://" not in url and not url.startswith("/"):
        url = "//" + url

    try:
        parsed = parse_url(url)
    except LocationParseError as e:
        raise DestinationValueError(destination) from e

    if not parsed.host:
        raise DestinationValueError(destination)

    normalized = f"{parsed.scheme or DEFAULT_SCHEME}://{parsed.host}"
    if parsed.port:
        normalized += f":{parsed.port}"
    if parsed.path:
        normalized += parsed.path.rstrip("/")
    return normalized
