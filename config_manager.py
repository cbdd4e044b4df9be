#!/usr/bin/env python3
"""
설정 관리 모듈

Builds a validated MonitorConfig from command-line arguments.
"""
import argparse
import ipaddress
import re

from dns_query import split_server
from models import (
    DEFAULT_INTERVAL,
    DEFAULT_RECORD_TYPE,
    RECORD_TYPES,
    MonitorConfig,
    is_valid_record_type,
)

VERSION = '1.0.0'
PROG = 'dns-monitor'

ALL_SERVERS = ('8.8.8.8:53', '1.1.1.1:53', '1.0.0.1:53')

_INTERVAL_RE = re.compile(r'(\d+)([smh]?)')
_INTERVAL_UNITS = {'': 1, 's': 1, 'm': 60, 'h': 3600}

USAGE = f"""{PROG} [OPTIONS] DOMAIN [DOMAIN...]"""

EPILOG = f"""examples:
    {PROG} example.com
    {PROG} -i 30s example.com api.example.com
    {PROG} -t CNAME --until-change www.example.com
    {PROG} -s 8.8.8.8 -s 1.1.1.1 example.com
    {PROG} -o /var/log/dns-monitor.log example.com
"""


class ConfigError(Exception):
    """Malformed or missing command-line input. Fatal before monitoring starts."""


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise ConfigError(message)


def parse_interval(value):
    """
    간격 문자열을 초 단위 정수로 변환합니다.

    '30s', '5m', '2h' 또는 숫자만('45', 초) 허용합니다.

    Args:
        value (str): 간격 문자열

    Returns:
        int: 초

    Raises:
        ConfigError: 형식이 잘못되었거나 0일 때
    """
    s = str(value or '').strip()
    m = _INTERVAL_RE.fullmatch(s)
    if not m:
        raise ConfigError(f"invalid duration format: {value} (use formats like 5s, 2m, 1h)")
    seconds = int(m.group(1)) * _INTERVAL_UNITS[m.group(2)]
    if seconds <= 0:
        raise ConfigError(f"interval must be positive: {value}")
    return seconds


def normalize_server(value):
    """
    DNS 서버 주소를 정규화합니다. 포트가 없으면 ':53'을 붙입니다.

    Args:
        value (str): 서버 주소 ('8.8.8.8' 또는 '8.8.8.8:5353')

    Returns:
        str: 'host:port' 형식 주소

    Raises:
        ConfigError: 호스트가 IP 주소가 아니거나 포트가 정수가 아닐 때
    """
    s = str(value or '').strip()
    if not s:
        raise ConfigError("empty DNS server address")
    if ':' not in s:
        s += ':53'
    try:
        host, _port = split_server(s)
        ipaddress.ip_address(host)
    except ValueError:
        raise ConfigError(f"invalid DNS server address: {value} (use an IP address, e.g. 8.8.8.8)")
    return s


def _interval_type(value):
    try:
        return parse_interval(value)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(f"invalid interval: {e}")


def _workers_type(value):
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid worker count: {value}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"worker count must be at least 1: {value}")
    return n


def format_interval(seconds):
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


def build_parser():
    parser = ArgumentParser(
        prog=PROG,
        usage=USAGE,
        description=f"DNS Monitor Tool v{VERSION}: watch DNS records and report changes.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("-t", "--type", dest="record_type", default=DEFAULT_RECORD_TYPE,
                        metavar="TYPE", type=str.upper,
                        help=f"DNS record type ({', '.join(RECORD_TYPES)}) [default: {DEFAULT_RECORD_TYPE}]")
    parser.add_argument("-i", "--interval", default=DEFAULT_INTERVAL, type=_interval_type,
                        metavar="DURATION", help=f"check interval [default: {DEFAULT_INTERVAL}s]")
    parser.add_argument("-s", "--server", dest="servers", action="append", default=[],
                        metavar="SERVER", help="DNS server to query (multiple allowed)")
    parser.add_argument("--all-servers", action="store_true",
                        help=f"query all major DNS servers ({', '.join(s.split(':')[0] for s in ALL_SERVERS)})")
    parser.add_argument("--until-change", action="store_true", help="stop after the first detected change")
    parser.add_argument("-o", "--output", dest="output_file", default=None, metavar="FILE",
                        help="log file output destination")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    parser.add_argument("-w", "--workers", dest="max_workers", default=1, type=_workers_type,
                        metavar="N", help="concurrent lookups per check [default: 1]")
    parser.add_argument("-v", "--version", action="version", version=f"DNS Monitor Tool v{VERSION}")
    parser.add_argument("domains", nargs=argparse.REMAINDER, metavar="DOMAIN",
                        help="domains to monitor")
    return parser


def validate_config(args):
    """
    파싱된 인자를 검증하고 MonitorConfig를 생성합니다.

    Raises:
        ConfigError: 도메인이 없거나 레코드 타입이 지원되지 않을 때
    """
    if args.all_servers:
        servers = list(ALL_SERVERS)
    else:
        servers = [normalize_server(s) for s in args.servers]

    domains = [d for d in args.domains if d]
    if not domains:
        raise ConfigError("at least one domain must be specified")
    # tokens after the first domain are domains; the first one must not look like a flag
    if domains[0].startswith('-'):
        raise ConfigError(f"unknown option: {domains[0]}")

    if not is_valid_record_type(args.record_type):
        raise ConfigError(f"unsupported record type: {args.record_type}")

    return MonitorConfig(
        domains=domains,
        record_type=args.record_type,
        interval=args.interval,
        servers=servers,
        until_change=args.until_change,
        output_file=args.output_file,
        no_color=args.no_color,
        max_workers=args.max_workers,
    )


def parse_args(argv=None):
    """
    명령행 인자를 파싱합니다.

    -h/--help, -v/--version 은 argparse가 출력 후 SystemExit(0)으로 종료합니다.

    Args:
        argv (list): 인자 리스트 (프로그램 이름 제외, None이면 sys.argv[1:])

    Returns:
        MonitorConfig: 검증된 설정

    Raises:
        ConfigError: 파싱 또는 검증 실패
    """
    args = build_parser().parse_args(argv)
    return validate_config(args)


def describe_config(config):
    """Banner lines summarizing what is about to be monitored."""
    lines = [
        f"DNS Monitor Tool v{VERSION}",
        f"Monitoring {len(config.domains)} domain(s) every {format_interval(config.interval)}",
        f"Record type: {config.record_type}",
    ]
    if config.servers:
        lines.append(f"DNS servers: [{' '.join(config.servers)}]")
    if config.output_file:
        lines.append(f"Output file: {config.output_file}")
    lines.append("Press Ctrl+C to stop")
    return lines
