from __future__ import annotations

import contextlib
import typing

import hypercorn

from dummyserver.app import hypercorn_app
from dummyserver.hypercornserver import bound_port, run_hypercorn_in_thread


class HypercornDummyServerTestCase:
    """
    Serves :data:`dummyserver.app.hypercorn_app` over plain HTTP for the
    duration of a test class.
    """

    scheme = "http"
    host = "127.0.0.1"
    port: typing.ClassVar[int]
    base_url: typing.ClassVar[str]

    _stack: typing.ClassVar[contextlib.ExitStack]

    @classmethod
    def setup_class(cls) -> None:
        with contextlib.ExitStack() as stack:
            config = hypercorn.Config()
            config.bind = [f"{cls.host}:0"]
            stack.enter_context(run_hypercorn_in_thread(config, hypercorn_app))
            cls._stack = stack.pop_all()
            cls.port = bound_port(config)
            cls.base_url = f"{cls.scheme}://{cls.host}:{cls.port}"

    @classmethod
    def teardown_class(cls) -> None:
        cls._stack.close()
