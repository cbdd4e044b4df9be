from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from dns_query import DNSClient
from models import DetectionOutcome, RecordType, ResolvedRecord, monitor_key

from .collect import Collected, collect_record
from .stores import RecordStore


logger = logging.getLogger(__name__)


def classify(key: str, collected: Collected, store: RecordStore) -> DetectionOutcome:
    """Compare a fresh lookup against the stored record for `key`.

    The store is written only for INITIAL and CHANGED outcomes; an error or
    an identical answer leaves the stored entry untouched.
    """
    if not collected.ok:
        logger.info("DNS query failed for %s (%s): %s", collected.domain, collected.rtype, collected.error)
        return DetectionOutcome.failed(collected.domain, collected.rtype, collected.error)

    record: ResolvedRecord = collected.record
    prev = store.get(key)

    # initial population
    if prev is None:
        store.put(key, record)
        logger.info("INIT %s (%s) -> %s", record.domain, record.type, record.render())
        return DetectionOutcome.initial(record)

    if prev == record:
        return DetectionOutcome.unchanged(prev)

    store.put(key, record)
    logger.info("CHANGED %s (%s): %s -> %s", record.domain, record.type, prev.render(), record.render())
    return DetectionOutcome.changed(prev, record)


def run_full_cycle(
    *,
    client: DNSClient,
    domains: Sequence[str],
    rtype: RecordType,
    store: RecordStore,
    max_workers: int = 1,
) -> List[DetectionOutcome]:
    """Run one check pass over every configured domain.

    Outcomes are returned in configured-list order. With max_workers > 1 the
    lookups overlap, but classification (and every store write) still runs
    here, in order, after all lookups of the pass have completed.
    """
    max_workers_eff = max(1, int(max_workers or 1))
    if max_workers_eff == 1 or len(domains) <= 1:
        collected = [collect_record(client, name, rtype) for name in domains]
    else:
        # Note: dnspython releases the GIL during network IO; threading helps.
        with ThreadPoolExecutor(max_workers=min(max_workers_eff, len(domains))) as ex:
            collected = list(ex.map(lambda name: collect_record(client, name, rtype), domains))

    return [classify(monitor_key(c.domain, c.rtype), c, store) for c in collected]
