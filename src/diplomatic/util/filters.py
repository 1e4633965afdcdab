from __future__ import annotations

import json as _json
import typing
import xml.etree.ElementTree as ElementTree

__all__ = ["json", "xml"]


def json(
    response: typing.Any,
    *,
    object_hook: typing.Callable[[dict[str, typing.Any]], typing.Any] | None = None,
    parse_float: typing.Callable[[str], typing.Any] | None = None,
    parse_int: typing.Callable[[str], typing.Any] | None = None,
) -> typing.Any:
    """
    Filter that decodes a JSON document.

    Anything that is not text, or that is not valid JSON, is returned
    untouched. Decode-sensing handlers rely on getting the very same object
    back to tell that decoding failed.
    """
    if not isinstance(response, (str, bytes, bytearray)):
        return response

    try:
        return _json.loads(
            response,
            object_hook=object_hook,
            parse_float=parse_float,
            parse_int=parse_int,
        )
    except (ValueError, RecursionError):
        # malformed or too deeply nested
        return response


def xml(response: typing.Any) -> typing.Any:
    """
    Filter that parses an XML document into an
    :class:`xml.etree.ElementTree.Element`.

    Anything that is not text, or that is not well-formed XML, is returned
    untouched.
    """
    if not isinstance(response, (str, bytes, bytearray)):
        return response

    try:
        return ElementTree.fromstring(response)
    except (ElementTree.ParseError, ValueError):
        return response
