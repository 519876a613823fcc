"""tests/conftest.py

Shared fixtures for the mycurl test suite.
"""

import _thread
import threading
from contextlib import contextmanager

import pytest


@pytest.fixture
def timeout_context():
    """Context manager failing the test if a blocking fetch hangs.

    Socket reads in the integration tests block the main thread, so the
    watchdog interrupts it from a timer thread.
    """

    @contextmanager
    def _timeout_context(seconds: float):
        timer = threading.Timer(seconds, _thread.interrupt_main)
        timer.daemon = True
        timer.start()
        try:
            yield
        except KeyboardInterrupt:
            pytest.fail(f"Fetch did not finish within {seconds} seconds")
        finally:
            timer.cancel()

    return _timeout_context
