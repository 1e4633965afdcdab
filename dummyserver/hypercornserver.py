from __future__ import annotations

import concurrent.futures
import contextlib
import functools
import sys
import threading
import traceback
import typing

import hypercorn
import hypercorn.trio
import hypercorn.typing
import trio
from quart_trio import QuartTrio
from urllib3.util.url import parse_url


# https://github.com/pgjones/hypercorn/blob/19dfb96411575a6a647cdea63fa581b48ebb9180/src/hypercorn/utils.py#L172-L178
async def graceful_shutdown(shutdown_event: threading.Event) -> None:
    while True:
        if shutdown_event.is_set():
            return
        await trio.sleep(0.1)


async def _start_server(
    config: hypercorn.Config,
    app: QuartTrio,
    ready_event: threading.Event,
    shutdown_event: threading.Event,
) -> None:
    async with trio.open_nursery() as nursery:
        try:
            config.bind = await nursery.start(
                functools.partial(
                    hypercorn.trio.serve,
                    app,
                    config,
                    shutdown_trigger=functools.partial(
                        graceful_shutdown, shutdown_event
                    ),
                )
            )
            ready_event.set()
        except Exception:
            print("Starting server failed", file=sys.stderr)
            traceback.print_exc()
            raise


def bound_port(config: hypercorn.Config) -> int:
    """
    The port picked by the operating system once the server is listening.
    """
    port = parse_url(config.bind[0]).port
    assert port is not None
    return port


@contextlib.contextmanager
def run_hypercorn_in_thread(
    config: hypercorn.Config, app: hypercorn.typing.ASGIFramework
) -> typing.Iterator[None]:
    ready_event = threading.Event()
    shutdown_event = threading.Event()

    with concurrent.futures.ThreadPoolExecutor(
        1, thread_name_prefix="hypercorn dummyserver"
    ) as executor:
        future = executor.submit(
            trio.run,
            _start_server,
            config,
            app,
            ready_event,
            shutdown_event,
        )
        ready_event.wait(5)
        if not ready_event.is_set():
            raise Exception("most likely failed to start server")

        try:
            yield
        finally:
            shutdown_event.set()
            future.result()


def main() -> int:
    # For debugging dummyserver itself - PYTHONPATH=src python -m dummyserver.hypercornserver
    from .app import hypercorn_app

    config = hypercorn.Config()
    config.bind = ["localhost:0"]
    ready_event = threading.Event()
    shutdown_event = threading.Event()
    trio.run(_start_server, config, hypercorn_app, ready_event, shutdown_event)
    return 0


if __name__ == "__main__":
    sys.exit(main())
