"""
The filter chain applied to every response before it is classified.

A filter is any callable taking the current value as its first argument,
followed by the extra arguments bound when it was registered. It steers the
chain with its return value:

* a plain value (or :class:`Continue`) replaces the current value;
* :class:`SkipNext` skips the next ``count`` filters;
* :class:`Abort` stops the chain.

Raising :class:`~diplomatic.exceptions.InterruptContinue` or
:class:`~diplomatic.exceptions.Interrupt` from inside a filter is equivalent to
returning :class:`SkipNext` or :class:`Abort`.
"""

from __future__ import annotations

import logging
import typing

from .exceptions import Interrupt, InterruptContinue

__all__ = ["Abort", "Continue", "FilterEntry", "SkipNext", "run_filters"]

log = logging.getLogger(__name__)


class FilterEntry(typing.NamedTuple):
    callable: typing.Callable[..., typing.Any]
    args: tuple[typing.Any, ...] = ()


class Continue(typing.NamedTuple):
    value: typing.Any


class SkipNext(typing.NamedTuple):
    count: int


class Abort(typing.NamedTuple):
    pass


FilterResult = typing.Union[Continue, SkipNext, Abort]


def _apply(entry: FilterEntry, value: typing.Any) -> FilterResult:
    """
    Call a single filter and normalise whatever it did into a FilterResult.
    """
    try:
        result = entry.callable(value, *entry.args)
    except InterruptContinue as signal:
        return SkipNext(signal.count)
    except Interrupt:
        return Abort()

    if isinstance(result, (Continue, SkipNext, Abort)):
        return result
    return Continue(result)


def run_filters(value: typing.Any, filters: typing.Iterable[FilterEntry]) -> typing.Any:
    """
    Run ``value`` through ``filters`` in order and return the filtered value.

    Any exception raised by a filter, other than the two control signals, is
    propagated to the caller.
    """
    skip = 0
    for position, entry in enumerate(filters):
        if skip > 0:
            skip -= 1
            continue

        result = _apply(entry, value)

        if isinstance(result, Continue):
            value = result.value
        elif isinstance(result, SkipNext):
            skip = max(int(result.count), 0)
            log.debug("Filter %d requested skipping %d filter(s)", position, skip)
        else:
            log.debug("Filter %d aborted the filter chain", position)
            break

    return value
