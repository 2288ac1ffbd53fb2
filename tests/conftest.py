import asyncio
import logging
import sys

import pytest

from rubber.errors import TransportError
from rubber.logging_config import LIBRARY_LOGGERS
from rubber.models import Response


class FakeTransport:
    """Answers every GET after `delay` seconds; `fail_on` lists 1-based call numbers that fail."""

    def __init__(self, delay: float = 0.001, status: int = 200, fail_on=(), events=None):
        self.delay = delay
        self.status = status
        self.fail_on = set(fail_on)
        self.events = events if events is not None else []
        self.calls = 0
        self.in_flight = 0
        self.peak = 0

    async def get(self, uri: str) -> Response:
        self.calls += 1
        n = self.calls
        self.events.append(f"start{n}")
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if n in self.fail_on:
                raise TransportError(uri, "connection refused")
            return Response(status=self.status, size=5)
        finally:
            self.in_flight -= 1


class HangingTransport:
    """Never answers; counts how many of its calls were cancelled."""

    def __init__(self):
        self.in_flight = 0
        self.cancelled = 0

    async def get(self, uri: str) -> Response:
        self.in_flight += 1
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1


@pytest.fixture
def restore_logging():
    # setup_logging reconfigures the root logger, library loggers and excepthook
    root = logging.getLogger()
    handlers, level, hook = root.handlers[:], root.level, sys.excepthook
    library_levels = {name: logging.getLogger(name).level for name in LIBRARY_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    sys.excepthook = hook
    for name, lvl in library_levels.items():
        logging.getLogger(name).setLevel(lvl)
