from concurrent.futures import Future, Executor
from typing import Any, Callable, Optional, Set
import structlog
from applauncher.core._event_loop import get_global_executor


def _call_now(func: Callable[[], Any]) -> None:
    func()


class ConcurrencyHelper:
    """
    Runs blocking work on the shared thread pool and hands results back to
    the main (UI) thread, tracking every submitted Future so pending work can
    be cancelled on shutdown.

    `main_thread_scheduler` receives a zero-argument callable and must arrange
    for it to run on the UI thread (under GTK this wraps GLib.idle_add).
    Without one, callbacks run synchronously on the worker thread.
    """

    def __init__(
        self,
        logger: Any = None,
        executor: Optional[Executor] = None,
        main_thread_scheduler: Optional[Callable[[Callable[[], Any]], Any]] = None,
    ):
        self.logger = logger or structlog.get_logger()
        self.executor = executor or get_global_executor()
        self._scheduler = main_thread_scheduler or _call_now
        self._running_futures: Set[Future] = set()

    def run_in_thread(self, func: Callable, *args, **kwargs) -> Future:
        """
        Executes a blocking function in a background thread via the shared executor.
        The resulting Future is automatically tracked for cleanup.
        """
        self.logger.debug(f"Scheduling function {func.__name__} in background thread.")
        future = self.executor.submit(func, *args, **kwargs)
        self._running_futures.add(future)
        future.add_done_callback(self._cleanup_future)
        return future

    def _cleanup_future(self, future: Future) -> None:
        """Removes a Future from the tracking set once it's done."""
        self._running_futures.discard(future)

    def schedule_in_main_thread(self, func: Callable, *args, **kwargs) -> None:
        """
        Schedules a function to be executed on the main thread.
        Exceptions are logged rather than propagated into the scheduler.
        """

        def wrapper():
            try:
                func(*args, **kwargs)
            except Exception as e:
                self.logger.error(
                    f"Error executing function {func.__name__} in main thread: {e}",
                    exc_info=True,
                )

        self._scheduler(wrapper)

    def run_with_callback(
        self,
        func: Callable,
        on_finish: Optional[Callable[[Any], None]] = None,
        *args,
        **kwargs,
    ) -> Future:
        """
        Runs `func` in the background and passes its result to `on_finish` on
        the main thread. A failing `func` is logged and `on_finish` is skipped.
        """
        future = self.run_in_thread(func, *args, **kwargs)
        name = getattr(func, "__qualname__", repr(func))

        def done_callback(done: Future) -> None:
            if done.cancelled():
                self.logger.debug(f"Background call {name} was cancelled.")
                return
            exception = done.exception()
            if exception is not None:
                self.logger.error(
                    f"Background call {name} failed: {exception}",
                    exc_info=exception,
                )
            elif on_finish:
                self.schedule_in_main_thread(on_finish, done.result())

        future.add_done_callback(done_callback)
        return future

    def cancel_pending(self) -> None:
        """Cancels every tracked Future that has not started running yet."""
        for future in list(self._running_futures):
            if not future.done():
                future.cancel()
        self.logger.debug("Pending background work cancelled.")
