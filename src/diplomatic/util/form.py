from __future__ import annotations

import os
import typing
from pathlib import Path
from urllib.parse import urlencode

from ..exceptions import UploadValueError

__all__ = ["UploadFile", "encode_urlencoded", "flatten_fields", "process_files"]

DEFAULT_MIME_TYPE = "application/octet-stream"

_TYPE_FILE_SPEC = typing.Union[
    str,
    "os.PathLike[str]",
    typing.Tuple[typing.Any, ...],
]


class UploadFile(typing.NamedTuple):
    """A file to send as part of a multipart/form-data body."""

    path: Path
    mime_type: str = DEFAULT_MIME_TYPE
    post_name: str | None = None

    @property
    def filename(self) -> str:
        return self.post_name or self.path.name

    def as_field(self) -> tuple[str, bytes, str]:
        """
        Read the file into the ``(filename, data, mime type)`` tuple urllib3
        expects for file fields.
        """
        return self.filename, self.path.read_bytes(), self.mime_type


def _scalar(value: typing.Any) -> typing.Any:
    if value is True:
        return "1"
    if value is False:
        return "0"
    if isinstance(value, (str, bytes, UploadFile)):
        return value
    return str(value)


def flatten_fields(
    data: typing.Any, prefix: str | None = None
) -> list[tuple[str, typing.Any]]:
    """
    Flatten nested mappings and sequences into a flat list of fields, naming
    nested keys with brackets the way HTML forms do.

    ``None`` values are left out and booleans become ``"1"`` and ``"0"``.

    .. code-block:: python

        >>> flatten_fields({"a": {"b": [1, 2]}, "c": True})
        [('a[b][0]', '1'), ('a[b][1]', '2'), ('c', '1')]
    """
    if isinstance(data, typing.Mapping):
        items: typing.Iterable[tuple[typing.Any, typing.Any]] = data.items()
    elif isinstance(data, (list, tuple)):
        items = enumerate(data)
    else:
        raise TypeError(f"Expected a mapping or a sequence of fields, got {data!r}")

    fields: list[tuple[str, typing.Any]] = []
    for key, value in items:
        name = str(key) if prefix is None else f"{prefix}[{key}]"
        if value is None:
            continue
        if isinstance(value, (typing.Mapping, list, tuple)) and not isinstance(
            value, UploadFile
        ):
            fields.extend(flatten_fields(value, name))
        else:
            fields.append((name, _scalar(value)))
    return fields


def encode_urlencoded(data: typing.Any) -> str:
    """
    Encode ``data`` as application/x-www-form-urlencoded.
    """
    if not data:
        return ""
    return urlencode(flatten_fields(data))


def _upload_file(field: str, spec: _TYPE_FILE_SPEC) -> UploadFile:
    mime_type = None
    post_name = None
    if isinstance(spec, tuple):
        if not 1 <= len(spec) <= 3:
            raise UploadValueError(
                field, "expected a (path, mime type[, post name]) tuple"
            )
        path, *rest = spec
        if rest:
            mime_type = rest[0]
        if len(rest) > 1:
            post_name = rest[1]
    else:
        path = spec

    if not isinstance(path, (str, os.PathLike)):
        raise UploadValueError(field, f"expected a path, got {path!r}")

    path = Path(path)
    if not path.is_file():
        raise UploadValueError(field, f"no such file: {str(path)!r}")

    return UploadFile(path, mime_type or DEFAULT_MIME_TYPE, post_name)


def process_files(
    files: typing.Mapping[str, _TYPE_FILE_SPEC],
) -> list[tuple[str, UploadFile]]:
    """
    Turn a mapping of field names to file descriptions into upload files.

    A file is described by a path (``str`` or :class:`os.PathLike`) or by a
    ``(path, mime_type[, post_name])`` tuple. The mime type defaults to
    ``application/octet-stream`` and the post name to the file name.
    """
    return [(field, _upload_file(field, spec)) for field, spec in files.items()]
