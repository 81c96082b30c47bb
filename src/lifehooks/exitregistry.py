import atexit
import enum
import logging
import os
import signal
import sys
import threading
import time

from lifehooks.registrybase import RegistryBase
from lifehooks.logging import logger

class ExitState(enum.Enum):
    NOT_EXECUTED = "not_executed"
    EXECUTING = "executing"
    COMPLETED = "completed"

def _exit_process(code):
    """End the process with status `code`. On the main thread this raises
    SystemExit as usual. From any other thread SystemExit would only end that
    thread, so the log handlers and standard streams are flushed and the
    process is ended with os._exit().
    """
    if threading.current_thread() is threading.main_thread():
        sys.exit(code)
    logging.shutdown()
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            stream.flush()
    os._exit(code)

class ExitRegistry(RegistryBase):
    """Callbacks to be run once at process termination, higher priority numbers
    first. Callbacks with equal priority run most recently registered first.

    `execute()` runs the callbacks exactly once no matter how many threads call
    it. Each callback runs inside its own fault boundary: an exception raised
    by one callback is logged and the remaining callbacks still run. When the
    last callback returns, the completion event is set and every thread blocked
    in `wait()` is released.

    `exit_func` and `exit_delay` control how `terminate()` ends the process.
    Both are plain attributes so they can be swapped out, for example to keep a
    test process alive.
    """
    kind = "exit"
    descending = True

    def __init__(self, config=None, exit_func=None):
        super().__init__(config=config)
        self.exit_func = _exit_process if exit_func is None else exit_func
        self.exit_delay = self.config.exit_delay
        # set as soon as execution begins, for workers that should wind down
        self.context = threading.Event()
        self._completed = threading.Event()
        self._state = ExitState.NOT_EXECUTED
        self._state_lock = threading.Lock()
        self._executing_thread = None
        self._installed = False

    @property
    def state(self) -> ExitState:
        return self._state

    @property
    def executed(self) -> bool:
        return self._state is not ExitState.NOT_EXECUTED

    @property
    def completed(self) -> bool:
        return self._completed.is_set()

    def execute(self) -> bool:
        """Run all registered exit callbacks, highest priority first. Returns
        True for the one call that ran the callbacks and False for every other
        call, which returns immediately without waiting.
        """
        with self._state_lock:
            if self._state is not ExitState.NOT_EXECUTED:
                return False
            self._state = ExitState.EXECUTING
            self._executing_thread = threading.get_ident()
        self.context.set()
        try:
            entries = self.callbacks()
            logger().debug(f"running {len(entries)} exit callbacks")
            for entry in entries:
                try:
                    self._invoke(entry)
                except Exception as exc:
                    logger().error(f"exit callback {entry} failed: {exc}", exc_info=True)
        finally:
            self._state = ExitState.COMPLETED
            self._completed.set()
        return True

    def wait(self, timeout=None) -> bool:
        """Block until the exit callbacks have finished running. Returns False
        only if `timeout` (in seconds) expires first.
        """
        return self._completed.wait(timeout)

    def terminate(self, code=0):
        """Run the exit callbacks and end the process with status `code` by
        calling `exit_func`, after sleeping `exit_delay` seconds.

        If another thread is already running the callbacks, wait for it to
        finish first. When called from inside an exit callback the callbacks
        are still running on this thread, so the wait is skipped.
        """
        self.execute()
        if self._executing_thread != threading.get_ident():
            self.wait()
        if self.exit_delay and self.exit_delay > 0:
            time.sleep(self.exit_delay)
        self.exit_func(code)

    def install(self, signals=(signal.SIGTERM, signal.SIGINT)) -> bool:
        """Hook this registry into process termination.

        Registers `execute()` with the atexit module, so the callbacks run when
        the interpreter exits normally, and installs handlers for `signals`
        that call `terminate(128 + signum)`. Signal handlers can only be
        installed from the main thread.

        Should be called once during program initialization. Returns False if
        the registry was already installed.
        """
        with self._state_lock:
            if self._installed:
                return False
            self._installed = True
        atexit.register(self.execute)
        for signum in signals:
            signal.signal(signum, self._handle_signal)
        return True

    def _handle_signal(self, signum, _frame):
        logger().info(f"received {signal.Signals(signum).name}, running exit callbacks")
        self.terminate(128 + signum)
