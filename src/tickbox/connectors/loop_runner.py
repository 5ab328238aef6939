# src/tickbox/connectors/loop_runner.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class ServiceLoopRunner:
    """
    Event loop living in a background thread.

    Why a thread:
    - console REPL is blocking (input()).
    - TaskService is async and wants its own event loop.
    The console submits coroutines here and waits for each result.
    """

    thread: threading.Thread
    loop: asyncio.AbstractEventLoop

    def submit(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run coro on the service loop and block until it finishes (re-raises its error)."""
        fut = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return fut.result()

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.loop.stop)
        except RuntimeError:
            logger.debug("Service loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_service_loop() -> ServiceLoopRunner:
    ready = threading.Event()
    holder: dict[str, asyncio.AbstractEventLoop] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        holder["loop"] = loop
        ready.set()

        try:
            loop.run_forever()
        finally:
            with contextlib.suppress(Exception):
                loop.run_until_complete(loop.shutdown_default_executor())
            loop.close()

    t = threading.Thread(target=runner, name="tickbox-service-loop", daemon=True)
    t.start()

    if not ready.wait(timeout=5.0) or "loop" not in holder:
        raise RuntimeError("Service loop thread did not initialize.")

    logger.debug("Service loop thread started.")
    return ServiceLoopRunner(thread=t, loop=holder["loop"])
