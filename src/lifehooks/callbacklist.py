"""src/lifehooks/callbacklist.py"""
import bisect
import dataclasses
import inspect
import threading
from typing import Callable

from lifehooks.errors import NilCallbackError

@dataclasses.dataclass(frozen=True)
class CallbackEntry:
    """A registered callback. `func` takes no arguments and its return value is
    ignored. `file` and `line` locate the registration site and are only used
    for diagnostics, they are `None` when the site could not be determined."""
    priority: int
    func: Callable[[], None]
    file: str | None = None
    line: int | None = None

    @property
    def name(self) -> str:
        return getattr(self.func, "__qualname__", None) or repr(self.func)

    def __str__(self):
        if self.file is None:
            return f"{self.name} (priority={self.priority})"
        return f"{self.name} (priority={self.priority}, {self.file}:{self.line})"

class CallbackList:
    """A thread-safe list of `CallbackEntry` kept in execution order.

    With `descending=False` entries are ordered by ascending priority and equal
    priorities keep their registration order. With `descending=True` entries
    are ordered by descending priority and equal priorities are in reverse
    registration order, so the most recently registered of them comes first.
    Both orders are maintained by binary search insertion and never depend on
    the stability of a sort.
    """
    def __init__(self, descending=False):
        self.descending = descending
        self._entries = []
        self._lock = threading.Lock()

    def insert(self, priority, func, file=None, line=None, name="CallbackList.insert: callback") -> CallbackEntry:
        """Insert `func` with `priority` and return its entry. Raises
        `NilCallbackError` if `func` is None or not callable, and `TypeError`
        if `priority` is not an int, using `name` to identify the failing
        operation in the message.
        """
        if func is None:
            raise NilCallbackError(f"{name} is None")
        if not callable(func):
            raise NilCallbackError(f"{name} {func!r} is not callable")
        # bool is an int subclass but never a meaningful priority
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise TypeError(f"{name} priority must be an int, got {priority!r}")
        entry = CallbackEntry(priority, func, file, line)
        with self._lock:
            if self.descending:
                bisect.insort_left(self._entries, entry, key=lambda e: -e.priority)
            else:
                bisect.insort_right(self._entries, entry, key=lambda e: e.priority)
        return entry

    def snapshot(self) -> list[CallbackEntry]:
        """Return a copy of the entries in execution order. Later insertions
        are not reflected in the returned list.
        """
        with self._lock:
            return list(self._entries)

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __iter__(self):
        return iter(self.snapshot())

def caller_location(depth=2) -> tuple[str | None, int | None]:
    """Return the (file, line) of the frame `depth` levels above the caller of
    this function, or (None, None) if the stack is not that deep.
    """
    frame = inspect.currentframe()
    try:
        for _ in range(depth + 1):
            if frame is None:
                return (None, None)
            frame = frame.f_back
        if frame is None:
            return (None, None)
        return (frame.f_code.co_filename, frame.f_lineno)
    finally:
        del frame
