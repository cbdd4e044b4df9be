#!/usr/bin/env python3
"""Reporter: turns detection outcomes into human-readable lines.

Each line goes to two places:
- the interactive display (stdout), ANSI-colored unless no_color is set
- the event log (see history_manager), always plain text

Two layouts are supported. A single monitored domain prints one block per
outcome; several domains print a timestamp header followed by one tree line
per domain and a blank separator.
"""
import sys
import logging
from datetime import datetime
from typing import List, Sequence, Tuple

from colorama import Fore, Style

from models import CHANGED, ERROR, INITIAL, UNCHANGED, DetectionOutcome
from monitor.state_utils import iter_positions, tree_marker


TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
ARROW = '→'

# Roles -> ANSI colors
COLOR_WARNING = Fore.YELLOW
COLOR_SUCCESS = Fore.GREEN
COLOR_ALERT = Fore.RED
COLOR_INFO = Fore.BLUE

Line = Tuple[str, str]  # (text, color)


def colorize(message, color):
    return f"{color}{message}{Style.RESET_ALL}"


def format_single(outcome: DetectionOutcome, timestamp: str) -> List[Line]:
    """Lines for the single-domain layout."""
    head = f"[{timestamp}] {outcome.domain} ({outcome.rtype})"
    if outcome.kind == ERROR:
        return [(f"{head} - ERROR: {outcome.error}", COLOR_WARNING)]
    if outcome.kind == INITIAL:
        return [(f"{head} - Initial: {outcome.current.render()}", COLOR_SUCCESS)]
    if outcome.kind == CHANGED:
        return [
            (f"{head} - CHANGE DETECTED:", COLOR_ALERT),
            (f"  Before: {outcome.previous.render()}", COLOR_ALERT),
            (f"  After:  {outcome.current.render()}", COLOR_INFO),
        ]
    if outcome.kind == UNCHANGED:
        return [(f"{head} - No change: {outcome.current.render()}", COLOR_SUCCESS)]
    raise ValueError(f"unknown outcome kind: {outcome.kind}")


def format_in_group(outcome: DetectionOutcome, is_last: bool) -> Line:
    """One tree line for the grouped (multi-domain) layout."""
    head = f"{tree_marker(is_last)} {outcome.domain} ({outcome.rtype})"
    if outcome.kind == ERROR:
        return f"{head}: ERROR - {outcome.error}", COLOR_WARNING
    if outcome.kind == INITIAL:
        return f"{head}: {outcome.current.render()} (initial)", COLOR_SUCCESS
    if outcome.kind == CHANGED:
        return (
            f"{head}: {outcome.previous.render()} {ARROW} {outcome.current.render()} (CHANGED)",
            COLOR_ALERT,
        )
    if outcome.kind == UNCHANGED:
        return f"{head}: {outcome.current.render()} (no change)", COLOR_SUCCESS
    raise ValueError(f"unknown outcome kind: {outcome.kind}")


class Reporter:
    def __init__(self, event_log: logging.Logger, display=None, no_color=False, now=datetime.now):
        self.event_log = event_log
        self.display = display or sys.stdout
        self.no_color = no_color
        self._now = now

    def timestamp(self) -> str:
        return self._now().strftime(TIMESTAMP_FORMAT)

    def _print(self, text):
        self.display.write(text + '\n')
        self.display.flush()

    def emit(self, message, color):
        """Write one line to the display and to the event log."""
        self._print(message if self.no_color else colorize(message, color))
        self.event_log.info(message)

    def notice(self, message=''):
        """Display-only status text (banner, exit messages)."""
        self._print(message)

    def report_tick(self, outcomes: Sequence[DetectionOutcome], grouped: bool) -> None:
        ts = self.timestamp()
        if not grouped:
            for outcome in outcomes:
                for text, color in format_single(outcome, ts):
                    self.emit(text, color)
            return

        self._print(f"[{ts}]")
        self.event_log.info("[%s]", ts)
        for _i, outcome, is_last in iter_positions(outcomes):
            text, color = format_in_group(outcome, is_last)
            self.emit(text, color)
        self._print('')
