# The process-wide registry API lives in lifehooks.process, it is re-exported
# here so that callers can simply `import lifehooks`.

from lifehooks.errors import LifehooksError, NilCallbackError, ConfigError
from lifehooks.callbacklist import CallbackEntry, CallbackList
from lifehooks.initregistry import InitRegistry
from lifehooks.exitregistry import ExitRegistry, ExitState
from lifehooks.process import (
    on_init, on_init_with_priority, run_init, list_init_callbacks,
    on_exit, on_exit_with_priority, execute, is_executed, wait, terminate,
    done, install, list_exit_callbacks,
    register, register_with_priority, register_init, register_init_with_priority,
)
