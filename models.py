#!/usr/bin/env python3
"""DNS monitor data models.

Explicit, typed structures passed between the resolver, the change detector,
the scheduler and the reporter. Kept lightweight: plain dataclasses, no
validation framework.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple


RecordType = str  # 'A' | 'AAAA' | 'CNAME' | 'MX' | 'TXT'

RECORD_TYPES: Tuple[str, ...] = ('A', 'AAAA', 'CNAME', 'MX', 'TXT')

DEFAULT_RECORD_TYPE = 'A'
DEFAULT_INTERVAL = 5  # seconds

# Outcome kinds
INITIAL = 'initial'
UNCHANGED = 'unchanged'
CHANGED = 'changed'
ERROR = 'error'


def is_valid_record_type(rtype: str) -> bool:
    return rtype in RECORD_TYPES


def monitor_key(domain: str, rtype: RecordType) -> str:
    """Store key for one monitored target, e.g. 'example.com:A'."""
    return f"{domain}:{rtype}"


@dataclass(frozen=True)
class ResolvedRecord:
    domain: str
    type: RecordType
    values: Tuple[str, ...] = ()

    def __post_init__(self):
        # sorted once here so equality is order-independent
        object.__setattr__(self, 'values', tuple(sorted(str(v) for v in self.values)))

    def render(self) -> str:
        return '[' + ', '.join(self.values) + ']'

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class DetectionOutcome:
    """Result of comparing one lookup against the last-known record.

    kind is one of INITIAL, UNCHANGED, CHANGED, ERROR.
    - INITIAL / UNCHANGED: `current` holds the record.
    - CHANGED: `previous` is the replaced record, `current` the new one.
    - ERROR: `error` holds the lookup failure, both records are None.
    """
    kind: str
    domain: str
    rtype: RecordType
    current: Optional[ResolvedRecord] = None
    previous: Optional[ResolvedRecord] = None
    error: Optional[BaseException] = None

    @classmethod
    def initial(cls, record: ResolvedRecord) -> 'DetectionOutcome':
        return cls(INITIAL, record.domain, record.type, current=record)

    @classmethod
    def unchanged(cls, record: ResolvedRecord) -> 'DetectionOutcome':
        return cls(UNCHANGED, record.domain, record.type, current=record)

    @classmethod
    def changed(cls, previous: ResolvedRecord, current: ResolvedRecord) -> 'DetectionOutcome':
        return cls(CHANGED, current.domain, current.type, current=current, previous=previous)

    @classmethod
    def failed(cls, domain: str, rtype: RecordType, cause: BaseException) -> 'DetectionOutcome':
        return cls(ERROR, domain, rtype, error=cause)

    def is_changed(self) -> bool:
        return self.kind == CHANGED


@dataclass(frozen=True)
class MonitorConfig:
    domains: List[str] = field(default_factory=list)
    record_type: RecordType = DEFAULT_RECORD_TYPE
    interval: int = DEFAULT_INTERVAL
    servers: List[str] = field(default_factory=list)  # 'host:port'
    until_change: bool = False
    output_file: Optional[str] = None
    no_color: bool = False
    max_workers: int = 1  # concurrent lookups inside one tick

    @property
    def grouped(self) -> bool:
        """More than one domain switches the reporter to the grouped layout."""
        return len(self.domains) > 1


def any_changed(outcomes: Iterable[DetectionOutcome]) -> bool:
    return any(o.is_changed() for o in outcomes)
