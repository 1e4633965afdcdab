from __future__ import annotations

import typing
from collections.abc import Mapping

__all__ = ["TransportInfo"]


class TransportInfo(Mapping[str, typing.Any]):
    """
    Read-only mapping of the diagnostics gathered by the transport while
    performing a request: the final url, the method, the elapsed time, the
    transport error if there was one, and so on.

    Keys are also reachable as attributes, so ``info.url`` and ``info["url"]``
    are the same thing. Missing attributes read as ``None``.

    .. code-block:: python

        >>> info = TransportInfo({"url": "https://example.com/", "elapsed": 0.2})
        >>> info.url
        'https://example.com/'
        >>> info.error is None
        True
    """

    def __init__(self, data: typing.Mapping[str, typing.Any] | None = None) -> None:
        self._container: dict[str, typing.Any] = dict(data or {})

    def __getitem__(self, key: str) -> typing.Any:
        return self._container[key]

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._container)

    def __len__(self) -> int:
        return len(self._container)

    def __getattr__(self, name: str) -> typing.Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._container.get(name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._container!r})"
