"""Snapshot re-emission for anything the cog surface wants to watch."""
import asyncio
import inspect
import logging
from typing import Any, Callable, List, Set

log = logging.getLogger("red.pokehunt")


class Observable:
    """Keep a list of listeners and hand each one a snapshot after a change.

    Listeners may be plain callables or coroutine functions. Coroutines are
    scheduled on the running loop and never awaited by the emitter. A failing
    listener is logged and otherwise ignored.
    """

    def __init__(self):
        self._listeners: List[Callable[[Any], Any]] = []
        self._listener_tasks: Set[asyncio.Task] = set()

    def subscribe(self, listener: Callable[[Any], Any]) -> Callable[[], None]:
        """Register ``listener`` and return a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, snapshot: Any) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(snapshot)
                if inspect.isawaitable(result):
                    task = asyncio.ensure_future(result)
                    self._listener_tasks.add(task)
                    task.add_done_callback(self._listener_done)
            except Exception:
                log.exception(f"Listener {listener!r} failed")

    def _listener_done(self, task: asyncio.Task) -> None:
        self._listener_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            log.error("Async listener failed", exc_info=task.exception())
