#!/usr/bin/env python3
"""
DNS 모니터

Periodically resolves one record type for a list of domains and reports
whenever the answer changes.

Usage:
  dns-monitor example.com
  dns-monitor -i 30s example.com api.example.com
  dns-monitor -t CNAME --until-change www.example.com
"""
import sys
import logging

import colorama

from config_manager import ConfigError, describe_config, parse_args
from dns_query import DNSClient
from history_manager import close_event_log, open_event_log
from monitor.lifecycle import STOP_CHANGED, Scheduler, TickWaiter, signal_stop
from monitor.stores import RecordStore
from reporter import Reporter

logger = logging.getLogger(__name__)


class Monitor:
    """Wires config, resolver, record store, scheduler and reporter together."""

    def __init__(self, config, client=None, reporter=None, waiter=None):
        self.config = config
        self.client = client or DNSClient(config.servers)
        self.event_log = None
        if reporter is None:
            self.event_log = open_event_log(config.output_file)
            reporter = Reporter(self.event_log, no_color=config.no_color)
        self.reporter = reporter
        self.store = RecordStore()
        self.waiter = waiter or TickWaiter(config.interval)
        self.scheduler = Scheduler(
            config,
            self.client,
            on_tick=self._on_tick,
            store=self.store,
            waiter=self.waiter,
        )

    def _on_tick(self, outcomes):
        self.reporter.report_tick(outcomes, grouped=self.config.grouped)

    def start(self):
        for line in describe_config(self.config):
            self.reporter.notice(line)
        self.reporter.notice()

        try:
            with signal_stop(self.waiter):
                reason = self.scheduler.run()
        finally:
            if self.event_log is not None:
                close_event_log(self.event_log)

        if reason == STOP_CHANGED:
            self.reporter.notice("Change detected. Exiting due to --until-change mode.")
        else:
            self.reporter.notice("\nReceived interrupt signal. Stopping monitor...")
        return reason


def main(argv=None):
    logging.basicConfig(level=logging.WARNING, format="[%(levelname)s] %(message)s")

    try:
        config = parse_args(argv)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    colorama.just_fix_windows_console()
    Monitor(config).start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
