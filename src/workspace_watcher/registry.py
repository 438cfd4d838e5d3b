"""Handler registration and isolated dispatch of watch events."""

import asyncio
import inspect
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from .models import EventCategory, WatchEvent

logger = logging.getLogger(__name__)


Handler = Callable[[WatchEvent], Union[None, Awaitable[None]]]
CategoryKey = Union[EventCategory, str]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class HandlerRegistry:
    """
    Thread-safe mapping of event category to ordered handler lists.

    Handlers are matched by identity. Registering a handler that is
    already present for the same category is a no-op.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._handlers: Dict[EventCategory, List[Handler]] = {
            category: [] for category in EventCategory
        }
        self._lock = threading.Lock()

    def add(self, category: CategoryKey, handler: Handler) -> bool:
        """
        Register a handler for a category (or ``"all"``).

        Returns:
            True if added, False if it was already registered

        Raises:
            TypeError: If handler is not callable
            ValueError: If category is unknown
        """
        if not callable(handler):
            raise TypeError(f"handler must be callable, got {type(handler).__name__}")
        category = EventCategory.coerce(category)

        with self._lock:
            handlers = self._handlers[category]
            if any(h is handler for h in handlers):
                return False
            handlers.append(handler)
            return True

    def remove(self, category: CategoryKey, handler: Handler) -> bool:
        """
        Unregister a handler.

        Returns:
            True if removed, False if it was not registered
        """
        category = EventCategory.coerce(category)

        with self._lock:
            handlers = self._handlers[category]
            for i, registered in enumerate(handlers):
                if registered is handler:
                    del handlers[i]
                    return True
            return False

    def handlers_for(self, category: CategoryKey) -> Tuple[Handler, ...]:
        """Handlers registered for exactly this category."""
        category = EventCategory.coerce(category)
        with self._lock:
            return tuple(self._handlers[category])

    def snapshot(self, category: CategoryKey) -> Tuple[Handler, ...]:
        """
        Stable list of every handler interested in an event category.

        Category handlers come first, followed by ``all`` handlers. The
        tuple is detached from the registry, so later add/remove calls
        do not affect a dispatch already using it.
        """
        category = EventCategory.coerce(category)
        with self._lock:
            specific = tuple(self._handlers[category]) if category is not EventCategory.ALL else ()
            return specific + tuple(self._handlers[EventCategory.ALL])

    def clear(self) -> int:
        """
        Remove all handlers.

        Returns:
            Number of registrations removed
        """
        with self._lock:
            count = sum(len(handlers) for handlers in self._handlers.values())
            for handlers in self._handlers.values():
                handlers.clear()
            return count

    def __len__(self) -> int:
        """Total number of registrations."""
        with self._lock:
            return sum(len(handlers) for handlers in self._handlers.values())


async def _await_result(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class HandlerDispatcher:
    """
    Fans one event out to many handlers with per-handler isolation.

    Synchronous handlers run on a small thread pool. Awaitables, whether
    returned by an ``async def`` handler or by a plain function, are
    scheduled on an event loop and never hold a pool thread while they
    wait, so a slow coroutine cannot delay any other handler. Failures
    are logged and discarded; nothing is retried.

    Every dispatched invocation runs exactly once, even across close():
    closing refuses new work, lets queued and running handlers finish,
    then releases the pool and the loop thread.
    """

    def __init__(
        self,
        max_workers: int = 4,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize the dispatcher and start its loop thread.

        Args:
            max_workers: Threads for synchronous handler calls
            loop: Caller's event loop for awaitables; used while it is
                running, otherwise the dispatcher's own loop is used
        """
        self.loop = loop
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="WatchHandler",
        )
        self._own_loop = asyncio.new_event_loop()
        self._loop_thread = threading.Thread(
            target=self._run_event_loop,
            daemon=True,
            name="WatchHandlerLoop",
        )
        self._loop_thread.start()

        self._outstanding = 0
        self._closing = False
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)

    def _run_event_loop(self) -> None:
        """Run the dispatcher's event loop in its background thread."""
        asyncio.set_event_loop(self._own_loop)
        try:
            self._own_loop.run_forever()
        finally:
            self._own_loop.close()

    def dispatch(self, event: WatchEvent, handlers: Tuple[Handler, ...]) -> List[Future]:
        """
        Start one isolated invocation per handler.

        Args:
            event: The event to deliver
            handlers: Snapshot of handlers to invoke

        Returns:
            One future per handler, resolved to True when the handler
            completed or False when it failed

        Raises:
            RuntimeError: If the dispatcher has been closed
        """
        logger.debug(f"Dispatching {event.category.value} {event.path} to {len(handlers)} handler(s)")

        completions = []
        for handler in handlers:
            done = self._track()
            if inspect.iscoroutinefunction(handler):
                # Calling it only builds the coroutine
                self._invoke(handler, event, done)
            else:
                self._executor.submit(self._invoke, handler, event, done)
            completions.append(done)
        return completions

    def _track(self) -> Future:
        with self._lock:
            if self._closing:
                raise RuntimeError("HandlerDispatcher is closed")
            self._outstanding += 1
        return Future()

    def _invoke(self, handler: Handler, event: WatchEvent, done: Future) -> None:
        try:
            result = handler(event)
        except Exception as e:
            self._log_failure(handler, event, e)
            self._finish(done, False)
            return

        if inspect.isawaitable(result):
            self._schedule(handler, event, result, done)
        else:
            self._finish(done, True)

    def _target_loop(self) -> asyncio.AbstractEventLoop:
        if self.loop is not None and self.loop.is_running():
            return self.loop
        return self._own_loop

    def _schedule(self, handler: Handler, event: WatchEvent, awaitable: Awaitable[Any], done: Future) -> None:
        """Hand an awaitable to the event loop without waiting for it."""
        wrapper = _await_result(awaitable)
        try:
            future = asyncio.run_coroutine_threadsafe(wrapper, self._target_loop())
        except RuntimeError as e:
            wrapper.close()
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._log_failure(handler, event, e)
            self._finish(done, False)
            return

        future.add_done_callback(lambda f: self._on_awaitable_done(handler, event, done, f))

    def _on_awaitable_done(self, handler: Handler, event: WatchEvent, done: Future, future: Future) -> None:
        if future.cancelled():
            logger.warning(f"Handler {_handler_name(handler)} was cancelled for {event.category.value} {event.path}")
            self._finish(done, False)
            return

        error = future.exception()
        if error is not None:
            self._log_failure(handler, event, error)
            self._finish(done, False)
        else:
            self._finish(done, True)

    def _log_failure(self, handler: Handler, event: WatchEvent, error: BaseException) -> None:
        logger.error(
            f"Handler {_handler_name(handler)} failed for "
            f"{event.category.value} {event.path}: {error}",
            exc_info=(type(error), error, error.__traceback__),
        )

    def _finish(self, done: Future, ok: bool) -> None:
        with self._lock:
            self._outstanding -= 1
            drained = self._outstanding == 0
            if drained:
                self._idle.notify_all()
            release = drained and self._closing

        done.set_result(ok)
        if release:
            self._release()

    def close(self) -> None:
        """
        Stop accepting new events.

        Handlers already dispatched still run to completion; the pool and
        the loop thread are released once the last of them finishes.
        Safe to call more than once, including from inside a handler.
        """
        with self._lock:
            if self._closing:
                return
            self._closing = True
            drained = self._outstanding == 0

        if drained:
            self._release()

    def _release(self) -> None:
        self._executor.shutdown(wait=False)
        self._own_loop.call_soon_threadsafe(self._own_loop.stop)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until no handler invocation is outstanding.

        Returns:
            True if idle, False if the timeout expired first
        """
        with self._idle:
            return self._idle.wait_for(lambda: self._outstanding == 0, timeout)

    def pending(self) -> int:
        """Number of handler invocations that have not finished."""
        with self._lock:
            return self._outstanding

    def is_closed(self) -> bool:
        with self._lock:
            return self._closing
