# This module is a wrapper over pythons logging module. All logging in
# lifehooks should happen through the functions defined in this module.

import logging
import logging.handlers
import inspect

ROOT_LOGGER_NAME = "lifehooks"

def init_logging(stderr=True, logfile=None, syslog=False, syslog_address="/dev/log", level=logging.INFO):
    """Initialize logging for lifehooks. Lifehooks can log to any and all of
    stderr, syslog, and a file. If this function is called multiple times then
    it will fully re-initialize the logging. If none of 'stderr', 'logfile', or
    'syslog' are True, then 'stderr' is set to True.

    Only the 'lifehooks' logger is configured, the applications root logger is
    left alone.
    """
    if not (stderr or logfile or syslog):
        stderr = True
    formatter = logging.Formatter("lifehooks - %(asctime)s - %(levelname)s - %(message)s", "%Y-%m-%d %H:%M:%S")
    handlers = []
    if syslog:
        syslog_handler = logging.handlers.SysLogHandler(address=syslog_address)
        syslog_handler.setFormatter(formatter)
        syslog_handler.setLevel(level)
        handlers.append(syslog_handler)
    if stderr:
        stderr_handler = logging.StreamHandler() # defaults to sys.stderr
        stderr_handler.setFormatter(formatter)
        stderr_handler.setLevel(level)
        handlers.append(stderr_handler)
    if logfile:
        logfile_handler = logging.FileHandler(logfile, encoding="utf-8")
        logfile_handler.setFormatter(formatter)
        logfile_handler.setLevel(level)
        handlers.append(logfile_handler)
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.propagate = False
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        package_logger.addHandler(handler)

def disable_logging():
    """Disable all lifehooks logging by removing all handlers and raising the
    level above CRITICAL.
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.CRITICAL + 1)
    package_logger.propagate = False

def reset_logging():
    """Undo `init_logging()` and `disable_logging()`, handing lifehooks records
    back to whatever logging the application has configured.
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True

def logger(name=None):
    """Return a logger with the specified name. If name is None then it defaults
    to the name of the callers module. Names outside of the 'lifehooks'
    namespace are nested under it so they share its handlers.
    """
    if name is None:
        module = inspect.getmodule(inspect.stack()[1][0])
        name = module.__name__ if module is not None else ROOT_LOGGER_NAME
    if not name:
        name = ROOT_LOGGER_NAME
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
