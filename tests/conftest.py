### conftest.py is implicitly imported into all pytest test files. This file
### can be thought of as a collection of globally available pytest fixtures.

import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest
from unittest.mock import Mock

import lifehooks
import lifehooks.process
import lifehooks.logging
from lifehooks.config import Config
from lifehooks.initregistry import InitRegistry
from lifehooks.exitregistry import ExitRegistry

@pytest.fixture(autouse=True)
def reset_lifehooks_logging():
    """Hand lifehooks log records back to the root logger (and so to caplog)
    after every test, even if the test called `init_logging()`.
    """
    lifehooks.logging.reset_logging()
    yield
    lifehooks.logging.reset_logging()

@pytest.fixture
def call_log():
    """A list that the callbacks made by `recorder` append to."""
    return []

@pytest.fixture
def recorder(call_log):
    """Fixture for generating callbacks that append `value` to `call_log` when
    called.
    """
    def generator(value):
        def callback():
            call_log.append(value)
        return callback
    return generator

@pytest.fixture
def init_registry():
    """A fresh InitRegistry with default configuration."""
    return InitRegistry(config=Config())

@pytest.fixture
def exit_registry():
    """A fresh ExitRegistry whose `exit_func` is a Mock, so `terminate()` does
    not end the test process.
    """
    return ExitRegistry(config=Config(), exit_func=Mock())

@pytest.fixture
def process_registries(monkeypatch, init_registry, exit_registry):
    """Replace the process-wide registries in lifehooks.process with fresh ones
    for the duration of a test. Returns (init_registry, exit_registry).
    """
    monkeypatch.setattr(lifehooks.process, "init_registry", init_registry)
    monkeypatch.setattr(lifehooks.process, "exit_registry", exit_registry)
    return (init_registry, exit_registry)

@pytest.fixture
def run_script():
    """Fixture for running a Python script in a fresh interpreter that imports
    this copy of lifehooks. Lifehooks environment variables are cleared unless
    given in `env`. Returns the `subprocess.CompletedProcess`.
    """
    src_dir = str(Path(lifehooks.__file__).resolve().parents[1])
    def run(script, env=None):
        environ = {k: v for k, v in os.environ.items()
                   if k != "DEBUG" and not k.startswith("LIFEHOOKS_")}
        environ["PYTHONPATH"] = os.pathsep.join(p for p in (src_dir, environ.get("PYTHONPATH")) if p)
        environ.update(env or {})
        return subprocess.run([sys.executable, "-c", textwrap.dedent(script)],
                              capture_output=True, text=True, env=environ, timeout=60)
    return run
