from __future__ import annotations

import shlex
import typing

from .form import UploadFile

__all__ = ["build_cli_call"]


def _method_flag(method: str) -> str:
    if method == "GET":
        return "-G"
    if method == "HEAD":
        return "-I"
    return f"-X {method}"


def _form_flag(name: str, value: typing.Any) -> str:
    if isinstance(value, UploadFile):
        path = str(value.path).replace("\\", "\\\\").replace('"', '\\"')
        filename = value.filename.replace("\\", "\\\\").replace('"', '\\"')
        spec = f'{name}=@"{path}";type={value.mime_type};filename="{filename}"'
    else:
        if isinstance(value, bytes):
            value = value.decode("utf-8", "replace")
        spec = f"{name}={value}"
    return f" -F {shlex.quote(spec)}"


def build_cli_call(
    method: str,
    url: str,
    *,
    user_agent: str,
    headers: typing.Mapping[str, str] | None = None,
    body: str | None = None,
    fields: typing.Sequence[tuple[str, typing.Any]] | None = None,
    insecure: bool = False,
) -> str:
    """
    Write a request as the equivalent ``curl`` command line call. Handy when
    logging or reproducing a request by hand.

    :param url:
        The full url, query string included.
    :param body:
        An application/x-www-form-urlencoded body.
    :param fields:
        Multipart fields. Takes precedence over ``body``.

    .. code-block:: python

        >>> build_cli_call("GET", "https://example.com/?a=1", user_agent="ua")
        'curl -Ssw "%{http_code}" -G -A ua -D - "https://example.com/?a=1"'
    """
    method = method.upper()
    parts = [f'curl -Ssw "%{{http_code}}" {_method_flag(method)}']
    parts.append(f" -A {shlex.quote(user_agent)}")

    # -I already prints the headers
    if method != "HEAD":
        parts.append(" -D -")

    for name, value in (headers or {}).items():
        parts.append(f" -H {shlex.quote(f'{name}: {value}')}")

    if fields:
        parts.extend(_form_flag(name, value) for name, value in fields)
    elif body:
        parts.append(f" -d {shlex.quote(body)}")

    if insecure:
        parts.append(" -k")

    parts.append(f' "{url}"')
    return "".join(parts)
