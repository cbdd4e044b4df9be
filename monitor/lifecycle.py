from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, List, Optional, Sequence

from dns_query import DNSClient
from models import DetectionOutcome, MonitorConfig, any_changed

from .engine import run_full_cycle
from .stores import RecordStore


logger = logging.getLogger(__name__)

TICK = 'tick'
INTERRUPT = 'interrupt'

STOP_CHANGED = 'changed'
STOP_INTERRUPTED = 'interrupted'

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class TickWaiter:
    """Blocks until the next tick is due or a stop is requested.

    wait() returns TICK or INTERRUPT. An interrupt requested while a tick is
    running is seen at the next wait(), which returns immediately.
    """

    def __init__(self, interval: float):
        self.interval = max(0.0, float(interval))
        self._stop = threading.Event()

    def request_stop(self) -> None:
        self._stop.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def wait(self) -> str:
        if self._stop.wait(self.interval):
            return INTERRUPT
        return TICK


class signal_stop:
    """Context manager routing SIGINT/SIGTERM to waiter.request_stop().

    Previous handlers are restored on exit. Outside the main thread signals
    cannot be installed and the waiter must be stopped directly.
    """

    def __init__(self, waiter: TickWaiter, signals=STOP_SIGNALS):
        self.waiter = waiter
        self.signals = signals
        self._previous = {}

    def _handle(self, signum, frame):
        logger.debug("received signal %s", signum)
        self.waiter.request_stop()

    def __enter__(self):
        if threading.current_thread() is threading.main_thread():
            for sig in self.signals:
                self._previous[sig] = signal.signal(sig, self._handle)
        return self.waiter

    def __exit__(self, exc_type, exc, tb):
        for sig, prev in self._previous.items():
            signal.signal(sig, prev)
        self._previous.clear()
        return False


class Scheduler:
    """Drives check passes at a fixed interval until interrupted.

    With until_change set, the loop also ends after the first pass in which
    any domain changed (the pass itself always completes).
    """

    def __init__(
        self,
        config: MonitorConfig,
        client: DNSClient,
        on_tick: Callable[[Sequence[DetectionOutcome]], None],
        store: Optional[RecordStore] = None,
        waiter: Optional[TickWaiter] = None,
    ):
        self.config = config
        self.client = client
        self.on_tick = on_tick
        self.store = store if store is not None else RecordStore()
        self.waiter = waiter if waiter is not None else TickWaiter(config.interval)
        self.ticks = 0

    def check_all(self) -> List[DetectionOutcome]:
        self.ticks += 1
        outcomes = run_full_cycle(
            client=self.client,
            domains=self.config.domains,
            rtype=self.config.record_type,
            store=self.store,
            max_workers=self.config.max_workers,
        )
        self.on_tick(outcomes)
        return outcomes

    def run(self) -> str:
        """Loop until a stop condition; returns STOP_CHANGED or STOP_INTERRUPTED."""
        while True:
            if self.waiter.wait() == INTERRUPT:
                return STOP_INTERRUPTED
            outcomes = self.check_all()
            if self.config.until_change and any_changed(outcomes):
                return STOP_CHANGED
