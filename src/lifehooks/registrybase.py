import abc
import threading

from lifehooks.callbacklist import CallbackList, CallbackEntry, caller_location
from lifehooks.config import Config
from lifehooks.logging import logger

# Default priorities start above any typical explicit priority, so callbacks
# registered without one run after the explicitly prioritized ones.
DEFAULT_PRIORITY_START = 100

class RegistryBase(abc.ABC):
    """Abstract base class for the InitRegistry and ExitRegistry classes. A
    registry owns an ordered `CallbackList` and a default-priority counter.

    Subclasses set `kind` (used in log and error messages) and `descending`
    (the execution order of their callback list), and implement the way the
    callbacks are run.
    """
    kind = "callback"
    descending = False

    def __init__(self, config=None):
        if config is None:
            config = Config()
        self.config = config
        self._callbacks = CallbackList(descending=self.descending)
        self._next_default_priority = DEFAULT_PRIORITY_START
        self._default_priority_lock = threading.Lock()

    @property
    def debug(self) -> bool:
        return self.config.debug

    def register(self, priority, func, stacklevel=1) -> CallbackEntry:
        """Register `func` to be run with `priority`. `stacklevel` selects the
        frame recorded as the registration site, 1 being the direct caller.
        """
        return self._register(priority, func, stacklevel, "register")

    def register_default(self, func, stacklevel=1) -> CallbackEntry:
        """Register `func` with the next default priority. Default priorities
        are handed out in call order starting from 100, so callbacks
        registered this way keep their relative order.
        """
        if func is None or not callable(func):
            # validate before consuming a default priority
            return self._register(0, func, stacklevel, "register_default")
        with self._default_priority_lock:
            priority = self._next_default_priority
            self._next_default_priority += 1
        return self._register(priority, func, stacklevel, "register_default")

    def callbacks(self) -> list[CallbackEntry]:
        """Return a snapshot of the registered callbacks in execution order."""
        return self._callbacks.snapshot()

    def __len__(self):
        return len(self._callbacks)

    @property
    @abc.abstractmethod
    def executed(self) -> bool:
        """True once the registry's callbacks have started running."""
        ...

    def _register(self, priority, func, stacklevel, operation):
        file, line = caller_location(depth=stacklevel + 1)
        name = f"{type(self).__name__}.{operation}: {self.kind} callback"
        entry = self._callbacks.insert(priority, func, file=file, line=line, name=name)
        if self.debug:
            logger().debug(f"registered {self.kind} callback {entry}")
        return entry

    def _invoke(self, entry):
        if self.debug:
            logger().debug(f"running {self.kind} callback {entry}")
        entry.func()
