import asyncio
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from logging import getLogger
from typing import Callable, Optional, Protocol, runtime_checkable

logger = getLogger("requestkit.delivery")


@runtime_checkable
class DeliveryContext(Protocol):
    """Where completions and response actions are executed.

    Contexts running callbacks on a thread of their own may also expose
    ``owns_current_thread()`` so blocking waits on that thread can be refused.
    """

    def dispatch(self, fn: Callable[[], None]) -> None: ...


def _run_callback(fn: Callable[[], None]) -> None:
    try:
        fn()
    except Exception:
        logger.exception("Unhandled exception in delivered callback")


class SerialDeliveryQueue:
    """Runs callbacks one at a time, in submission order, on a dedicated thread."""

    def __init__(self, name: str = "requestkit-delivery"):
        self._thread_ident: Optional[int] = None
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=name, initializer=self._bind
        )

    def _bind(self) -> None:
        self._thread_ident = threading.get_ident()

    def owns_current_thread(self) -> bool:
        return self._thread_ident == threading.get_ident()

    def dispatch(self, fn: Callable[[], None]) -> None:
        self._executor.submit(_run_callback, fn)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


class EventLoopDeliveryContext:
    """Marshals callbacks onto an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._loop = loop

    def dispatch(self, fn: Callable[[], None]) -> None:
        self._loop.call_soon_threadsafe(_run_callback, fn)

    def owns_current_thread(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False


class ImmediateDeliveryContext:
    """Runs callbacks on whichever thread produced them."""

    def dispatch(self, fn: Callable[[], None]) -> None:
        _run_callback(fn)


_main_queue: Optional[SerialDeliveryQueue] = None
_worker_executor: Optional[ThreadPoolExecutor] = None
_lock = threading.Lock()


def main_queue() -> SerialDeliveryQueue:
    """Process-wide delivery queue used when none is configured."""
    global _main_queue
    with _lock:
        if _main_queue is None:
            _main_queue = SerialDeliveryQueue()
        return _main_queue


def worker_executor() -> Executor:
    """Process-wide executor the transport performs network calls on."""
    global _worker_executor
    with _lock:
        if _worker_executor is None:
            _worker_executor = ThreadPoolExecutor(thread_name_prefix="requestkit-worker")
        return _worker_executor
