class LifehooksError(Exception):
    ...

class NilCallbackError(LifehooksError, TypeError):
    """Raised at registration time when the callback is None or not callable."""
    ...

class ConfigError(LifehooksError):
    """Raised when lifehooks settings fail validation. The `errors` attribute is
    a list of (setting, message) pairs, one per invalid setting.
    """
    def __init__(self, errors):
        self.errors = errors
        super().__init__("; ".join(f"{setting}: {msg}" for setting, msg in errors))
