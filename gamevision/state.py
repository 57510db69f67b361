"""Observable state holders, the explicit session context and task scopes.

Screens observe :class:`Observable` values instead of polling services.
Every orchestration call takes a :class:`SessionContext` instead of looking
up a global "current user", and runs inside a :class:`TaskScope` that is
closed when the owning screen goes away.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar('T')

logger = logging.getLogger('gamevision.state')


class Observable(Generic[T]):
    """Thread-safe value holder with a subscribe/notify contract.

    Subscribers are called with the new value after every change, outside
    the internal lock, in subscription order.  Setting a value equal to the
    current one does not notify, unless *distinct* is ``False`` (used for
    event-like slots where repeating the same value must still be seen).
    """

    def __init__(self, value: T, distinct: bool = True) -> None:
        self._value = value
        self._distinct = distinct
        self._lock = threading.Lock()
        self._subscribers: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            if self._distinct and value == self._value:
                return
            self._value = value
            subscribers = list(self._subscribers)
        self._notify(subscribers, value)

    def update(self, fn: Callable[[T], T]) -> T:
        """Atomically replace the value with ``fn(value)`` and return it."""
        with self._lock:
            new_value = fn(self._value)
            changed = not self._distinct or new_value != self._value
            self._value = new_value
            subscribers = list(self._subscribers) if changed else []
        if changed:
            self._notify(subscribers, new_value)
        return new_value

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    @staticmethod
    def _notify(subscribers: List[Callable[[T], None]], value: T) -> None:
        for callback in subscribers:
            try:
                callback(value)
            except Exception:
                logger.exception("State subscriber %r failed", callback)


@dataclass(frozen=True)
class SessionContext:
    """Who the current screen is acting for.

    ``email`` is ``None`` for guests and before login.
    """

    email: Optional[str] = None
    is_guest: bool = False

    @property
    def is_authenticated(self) -> bool:
        return bool(self.email) and not self.is_guest


class TaskScope:
    """Background-task scope bound to the lifetime of one screen.

    Tasks are submitted to a private thread pool.  :meth:`close` cancels
    everything still queued and flips :attr:`cancelled`; tasks that are
    already running must check :attr:`cancelled` before publishing state.
    """

    def __init__(self, name: str = 'screen', max_workers: int = 4) -> None:
        self.name = name
        self._cancelled = threading.Event()
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix=f'gamevision_{name}')

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def submit(self, fn: Callable[..., T], *args, **kwargs) -> Optional['Future[T]']:
        """Schedule ``fn(*args, **kwargs)``; returns ``None`` once closed."""
        if self.cancelled:
            logger.debug("Scope %s closed, dropping task %r", self.name, fn)
            return None
        try:
            return self._executor.submit(fn, *args, **kwargs)
        except RuntimeError:
            # closed between the check and the submit
            return None

    def close(self, wait: bool = False) -> None:
        if not self._cancelled.is_set():
            logger.debug("Closing scope %s", self.name)
        self._cancelled.set()
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> 'TaskScope':
        return self

    def __exit__(self, *exc) -> None:
        self.close()
