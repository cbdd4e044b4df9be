#!/usr/bin/env python3
"""
DNS 쿼리 기능 모듈

Resolves one record type for one domain and normalizes the answer into a
ResolvedRecord.
"""
import ipaddress
import logging

import dns.exception
import dns.nameserver
import dns.resolver

from models import ResolvedRecord, RECORD_TYPES

logger = logging.getLogger(__name__)

DEFAULT_PORT = 53
DEFAULT_TIMEOUT = 5.0


class DNSLookupError(Exception):
    """Per-domain lookup failure. Recovered by the monitor, never fatal."""

    def __init__(self, domain, rtype, message):
        super().__init__(message)
        self.domain = domain
        self.rtype = rtype


class RecordNotFound(DNSLookupError):
    def __init__(self, domain, rtype):
        super().__init__(domain, rtype, f"no {rtype} records found for {domain}")


class ResolutionFailed(DNSLookupError):
    def __init__(self, domain, rtype, cause):
        super().__init__(domain, rtype, f"failed to lookup {rtype} record for {domain}: {cause}")
        self.cause = cause


class UnsupportedRecordType(DNSLookupError):
    def __init__(self, domain, rtype):
        super().__init__(domain, rtype, f"unsupported record type: {rtype}")


def split_server(addr):
    """
    'host:port', '[v6]:port' 또는 'host' 형식의 서버 주소를 (host, port)로 분리합니다.

    Args:
        addr (str): DNS 서버 주소

    Returns:
        tuple: (host, port)

    Raises:
        ValueError: 포트가 정수가 아닐 때
    """
    s = str(addr or '').strip()
    if s.startswith('['):
        host, _, rest = s[1:].partition(']')
        port = rest[1:] if rest.startswith(':') else ''
    elif s.count(':') == 1:
        host, port = s.split(':')
    else:
        # bare IPv4/hostname or an unbracketed IPv6 address
        host, port = s, ''
    return host, int(port) if port else DEFAULT_PORT


def _strip_root(name):
    """Drop a single trailing '.' from an absolute domain name."""
    return name[:-1] if name.endswith('.') else name


def _decode_txt(rr):
    # dnspython: rr.strings is a tuple of bytes chunks
    parts = []
    for s in getattr(rr, 'strings', ()):
        if isinstance(s, bytes):
            parts.append(s.decode('utf-8', errors='ignore'))
        else:
            parts.append(str(s))
    return ''.join(parts)


class DNSClient:
    """Thin wrapper around dns.resolver.Resolver.

    With no servers the system resolver configuration is used; otherwise
    every query goes to the given 'host:port' nameservers.
    """

    def __init__(self, servers=None, timeout=DEFAULT_TIMEOUT, resolver=None):
        self.servers = list(servers or [])
        self.timeout = timeout
        if resolver is None:
            resolver = self._build_resolver()
        self.resolver = resolver

    def _build_resolver(self):
        if not self.servers:
            r = dns.resolver.Resolver(configure=True)
        else:
            r = dns.resolver.Resolver(configure=False)
            nameservers = []
            for srv in self.servers:
                host, port = split_server(srv)
                nameservers.append(dns.nameserver.Do53Nameserver(host, port))
            r.nameservers = nameservers
        r.lifetime = self.timeout
        return r

    def query(self, domain, rtype):
        """
        Resolve `rtype` records for `domain`.

        Returns:
            ResolvedRecord: sorted, normalized values

        Raises:
            UnsupportedRecordType: before any network access
            RecordNotFound: the answer was empty after filtering
            ResolutionFailed: the resolver itself failed
        """
        rtype = str(rtype or '').upper()
        if rtype not in RECORD_TYPES:
            raise UnsupportedRecordType(domain, rtype)

        handler = getattr(self, '_query_' + rtype.lower())
        try:
            values = handler(domain)
        except DNSLookupError:
            raise
        except (dns.exception.DNSException, OSError) as e:
            logger.debug("DNS %s lookup failed for %s: %s", rtype, domain, e)
            raise ResolutionFailed(domain, rtype, e) from e

        if not values and rtype in ('A', 'AAAA', 'TXT'):
            raise RecordNotFound(domain, rtype)
        return ResolvedRecord(domain=domain, type=rtype, values=tuple(values))

    def _addresses(self, domain, rtype):
        # one family per query; an empty answer becomes RecordNotFound
        answers = self.resolver.resolve(domain, rtype, raise_on_no_answer=False)
        return [ipaddress.ip_address(rr.address) for rr in answers]

    def _query_a(self, domain):
        return sorted({str(ip) for ip in self._addresses(domain, 'A') if ip.version == 4})

    def _query_aaaa(self, domain):
        # IPv4-mapped addresses (::ffff:a.b.c.d) count as IPv4
        return sorted({str(ip) for ip in self._addresses(domain, 'AAAA')
                       if ip.version == 6 and ip.ipv4_mapped is None})

    def _query_cname(self, domain):
        # canonical_name is the query name itself when no CNAME exists
        answer = self.resolver.resolve(domain, 'A', raise_on_no_answer=False)
        return [_strip_root(answer.canonical_name.to_text())]

    def _query_mx(self, domain):
        answers = self.resolver.resolve(domain, 'MX')
        # plain string sort: "10 a" sorts before "5 b"
        return sorted(f"{rr.preference} {_strip_root(rr.exchange.to_text())}" for rr in answers)

    def _query_txt(self, domain):
        answers = self.resolver.resolve(domain, 'TXT')
        return sorted(_decode_txt(rr) for rr in answers)
