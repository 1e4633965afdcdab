"""
Selection of the callback answering a request.

Callbacks are registered per outcome on a :class:`CallbackDispatcher` (the
client). Once a response has been classified exactly one of them is picked,
in this order:

1. a :class:`~diplomatic.handlers.SelfHandling` response handler answers by
   itself and every registered callback is ignored;
2. ``on_error`` when the response was errored;
3. ``on_failure`` when it failed;
4. ``on_success`` when it was successful;
5. ``on_any``, whatever the outcome;
6. nothing registered matches: the dispatcher itself is returned so calls can
   keep being chained.

A registered callback that is not callable is returned as-is, which is handy
for simple flows and tests: ``client.on_success(True).on_any(False)``.
"""

from __future__ import annotations

import logging
import typing

from .handlers import ResponseHandler, SelfHandling

__all__ = ["CallbackDispatcher", "Invocable", "Literal", "Registration"]

log = logging.getLogger(__name__)

_SelfT = typing.TypeVar("_SelfT", bound="CallbackDispatcher")


class Invocable(typing.NamedTuple):
    fn: typing.Callable[..., typing.Any]


class Literal(typing.NamedTuple):
    value: typing.Any


class Registration(typing.NamedTuple):
    """A callback registered for one outcome, with its extra arguments."""

    handler: Invocable | Literal
    args: tuple[typing.Any, ...] = ()

    @classmethod
    def create(cls, handler: typing.Any, args: tuple[typing.Any, ...]) -> Registration:
        if callable(handler):
            return cls(Invocable(handler), args)
        return cls(Literal(handler), args)

    def resolve(self, response_handler: ResponseHandler) -> typing.Any:
        """
        Call the callback with the extra arguments followed by the response
        handler, or hand back the registered value when it is not callable.
        """
        if isinstance(self.handler, Invocable):
            return self.handler.fn(*self.args, response_handler)
        return self.handler.value


_OUTCOMES = ("error", "failure", "success", "any")


class CallbackDispatcher:
    """
    Holds the outcome callbacks of a client and dispatches a classified
    response to one of them.
    """

    def __init__(self) -> None:
        self._registrations: dict[str, Registration] = {}
        self._reset_handlers = True

    def _register(
        self: _SelfT, outcome: str, handler: typing.Any, args: tuple[typing.Any, ...]
    ) -> _SelfT:
        if handler is None:
            self._registrations.pop(outcome, None)
        else:
            self._registrations[outcome] = Registration.create(handler, args)
        return self

    def on_any(self: _SelfT, handler: typing.Any, *args: typing.Any) -> _SelfT:
        """
        Register a callback (or any value but ``None``) used when no callback
        registered for the actual outcome applies.

        The callback receives ``args`` followed by the response handler.
        """
        return self._register("any", handler, args)

    def on_error(self: _SelfT, handler: typing.Any, *args: typing.Any) -> _SelfT:
        """
        Register a callback (or any value but ``None``) for an errored
        response.

        The callback receives ``args`` followed by the response handler.
        """
        return self._register("error", handler, args)

    def on_failure(self: _SelfT, handler: typing.Any, *args: typing.Any) -> _SelfT:
        """
        Register a callback (or any value but ``None``) for a failed response.

        The callback receives ``args`` followed by the response handler.
        """
        return self._register("failure", handler, args)

    def on_success(self: _SelfT, handler: typing.Any, *args: typing.Any) -> _SelfT:
        """
        Register a callback (or any value but ``None``) for a successful
        response.

        The callback receives ``args`` followed by the response handler.
        """
        return self._register("success", handler, args)

    def reset_handlers_after_dispatch(self: _SelfT, reset: bool = True) -> _SelfT:
        """
        Choose whether registered callbacks are forgotten once one of them
        answered a request. They are by default.
        """
        self._reset_handlers = bool(reset)
        return self

    def has_handler(self, outcome: str) -> bool:
        if outcome not in _OUTCOMES:
            raise ValueError(f"Unknown outcome {outcome!r}, expected one of {_OUTCOMES}")
        return outcome in self._registrations

    def reset_handlers(self: _SelfT) -> _SelfT:
        self._registrations.clear()
        return self

    def _select(self, response_handler: ResponseHandler) -> Registration | None:
        checks = (
            ("error", response_handler.was_errored),
            ("failure", response_handler.was_failed),
            ("success", response_handler.was_successful),
        )
        for outcome, predicate in checks:
            registration = self._registrations.get(outcome)
            if registration is not None and predicate():
                log.debug("Dispatching to the %s handler", outcome)
                return registration

        registration = self._registrations.get("any")
        if registration is not None:
            log.debug("Dispatching to the any handler")
        return registration

    def dispatch(self, response_handler: ResponseHandler) -> typing.Any:
        """
        Hand a classified response to the callback registered for its
        outcome and return what the callback returns.
        """
        if isinstance(response_handler, SelfHandling):
            if response_handler.was_errored():
                return response_handler.on_error()
            if response_handler.was_failed():
                return response_handler.on_failure()
            if response_handler.was_successful():
                return response_handler.on_success()

        registration = self._select(response_handler)
        if registration is None:
            return self

        if self._reset_handlers:
            self._registrations.clear()

        return registration.resolve(response_handler)
