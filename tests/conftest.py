import io
import itertools
import logging
import threading

import pytest

from dns_query import ResolutionFailed
from models import ResolvedRecord
from monitor.lifecycle import INTERRUPT


class FakeClient:
    """Stands in for DNSClient: answers come from per-domain scripts.

    Each script entry is a list of values (success) or an exception.
    The last entry repeats once the script runs out.
    """

    def __init__(self, scripts):
        self.scripts = {d: list(s) for d, s in scripts.items()}
        self.calls = []
        self._lock = threading.Lock()

    def query(self, domain, rtype):
        with self._lock:
            self.calls.append((domain, rtype))
            script = self.scripts[domain]
            item = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(item, BaseException):
            raise item
        return ResolvedRecord(domain=domain, type=rtype, values=tuple(item))


class ScriptedWaiter:
    """TickWaiter replacement returning a fixed sequence of events."""

    def __init__(self, events):
        self._events = iter(events)
        self.stop_requested = False

    def request_stop(self):
        self.stop_requested = True

    def wait(self):
        if self.stop_requested:
            return INTERRUPT
        return next(self._events, INTERRUPT)


_logger_ids = itertools.count()


@pytest.fixture
def event_log():
    """A private event logger writing plain messages into a StringIO."""
    buf = io.StringIO()
    lg = logging.getLogger(f"tests.events.{next(_logger_ids)}")
    lg.setLevel(logging.INFO)
    lg.propagate = False
    handler = logging.StreamHandler(buf)
    handler.setFormatter(logging.Formatter('%(message)s'))
    lg.addHandler(handler)
    lg.buffer = buf
    yield lg
    lg.removeHandler(handler)


@pytest.fixture
def lookup_failure():
    def make(domain, rtype='A', cause='SERVFAIL'):
        return ResolutionFailed(domain, rtype, cause)
    return make


