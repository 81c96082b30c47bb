# Adapters that turn delivered OS signals into plain callback invocations. They
# are typically paired with the exit registry, for example
#
#     lifehooks.signals.run_once(lifehooks.done(), lambda _sig: lifehooks.terminate(0))
#
# Python only delivers signals to the main thread, so these functions have to
# be called from the main thread. Other threads stop them by setting `stop`.

import os
import queue
import signal
from contextlib import contextmanager

from lifehooks.logging import logger

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)

# how often the waiting loop wakes up to check `stop`
POLL_INTERVAL = 0.05

def kill(pid, signum):
    """Send `signum` to the process `pid`."""
    os.kill(pid, signum)

@contextmanager
def _delivered(signals):
    """Install handlers for `signals` that push the signal number onto a queue
    and yield that queue. The previous handlers are restored on exit.
    """
    delivered = queue.SimpleQueue() # put() is safe to call from a signal handler
    def handler(signum, _frame):
        delivered.put(signum)
    previous = {}
    try:
        for signum in signals:
            previous[signum] = signal.signal(signum, handler)
        yield delivered
    finally:
        for signum, prev_handler in previous.items():
            signal.signal(signum, prev_handler)

def _next_signal(delivered, stop):
    """Block until a signal arrives on `delivered` and return it, or return
    None once `stop` is set.
    """
    while not stop.is_set():
        try:
            return delivered.get(timeout=POLL_INTERVAL)
        except queue.Empty:
            continue
    return None

def run_once(stop, callback, *signals):
    """Wait until one of `signals` is delivered or the `stop` event is set, then
    call `callback` once with the signal number (None if stopped by `stop`).
    Returns the signal number or None.
    """
    signals = signals or DEFAULT_SIGNALS
    with _delivered(signals) as delivered:
        signum = _next_signal(delivered, stop)
    if signum is not None:
        logger().info(f"received {signal.Signals(signum).name}")
    callback(signum)
    return signum

def run_loop(stop, callback, *signals):
    """Call `callback` with the signal number every time one of `signals` is
    delivered, until the `stop` event is set.
    """
    signals = signals or DEFAULT_SIGNALS
    with _delivered(signals) as delivered:
        while (signum := _next_signal(delivered, stop)) is not None:
            logger().debug(f"received {signal.Signals(signum).name}")
            callback(signum)
