import threading

from lifehooks.registrybase import RegistryBase
from lifehooks.logging import logger

class InitRegistry(RegistryBase):
    """Callbacks to be run once at process initialization, lower priority
    numbers first. Callbacks with equal priority run in registration order.

    Unlike `ExitRegistry`, faults are not isolated. If an init callback raises,
    the exception propagates out of `run()` and the remaining callbacks are not
    run.
    """
    kind = "init"
    descending = False

    def __init__(self, config=None):
        super().__init__(config=config)
        self._executed = False
        self._run_lock = threading.Lock()

    @property
    def executed(self) -> bool:
        return self._executed

    def run(self) -> bool:
        """Run every registered init callback in order on the calling thread.
        Only the first call runs anything, later calls (including calls made
        after a failed run) return False without running any callbacks.
        """
        with self._run_lock:
            if self._executed:
                return False
            self._executed = True
        entries = self.callbacks()
        logger().debug(f"running {len(entries)} init callbacks")
        for entry in entries:
            self._invoke(entry)
        return True
