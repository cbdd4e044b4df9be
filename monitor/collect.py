from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dns_query import DNSClient, DNSLookupError
from models import RecordType, ResolvedRecord


@dataclass
class Collected:
    domain: str
    rtype: RecordType
    record: Optional[ResolvedRecord] = None
    error: Optional[DNSLookupError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.record is not None


def collect_record(client: DNSClient, domain: str, rtype: RecordType) -> Collected:
    """Query one (domain, type) and fold lookup failures into the result.

    Only DNSLookupError is folded; anything else is a bug and propagates.
    """
    try:
        record = client.query(domain, rtype)
    except DNSLookupError as e:
        return Collected(domain=domain, rtype=rtype, error=e)
    return Collected(domain=domain, rtype=rtype, record=record)
