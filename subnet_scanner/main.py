"""
Главный модуль сканера подсети
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import ScannerConfig, PingMethod, ReportFormat
from .ip_parser import IPParser, ParseError, NetworkTooLargeError
from .reporter import ReportGenerator
from .scanner import AsyncPingScanner
from .utils import setup_logging, validate_environment

logger = logging.getLogger(__name__)

USAGE_TEXT = """Usage: subnet-scanner -a <network> [options]
Example: subnet-scanner -a 192.168.1.0/24"""

INVALID_NETWORK_TEXT = "Invalid network format. Use CIDR notation, e.g., 192.168.1.0/24"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """Неверный набор аргументов командной строки"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def parse_arguments(argv: List[str]) -> argparse.Namespace:
    """Парсинг аргументов командной строки"""
    if not argv:
        raise UsageError("no arguments")

    parser = _ArgumentParser(
        prog='subnet-scanner',
        description='Subnet liveness scanner (ICMP echo)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  subnet-scanner -a 192.168.1.0/24
  subnet-scanner -a 10.0.0.0/22 --workers 512 --timeout 500
  subnet-scanner -a 10.0.0.0/24 --method icmp --privileged --format json
        """
    )

    parser.add_argument(
        '-a', '--address',
        required=True,
        metavar='NETWORK',
        help='Network in CIDR notation, e.g. 192.168.1.0/24'
    )

    parser.add_argument(
        '--timeout', '-t',
        type=int,
        default=1000,
        help='Per-host timeout in milliseconds (default: 1000)'
    )

    parser.add_argument(
        '--workers', '-w',
        type=int,
        default=256,
        help='Number of probes in flight at once (default: 256)'
    )

    parser.add_argument(
        '--method', '-m',
        choices=[m.value for m in PingMethod],
        default=PingMethod.PING.value,
        help='ping: system ping command, icmp: ICMP sockets (default: ping)'
    )

    parser.add_argument(
        '--privileged',
        action='store_true',
        help='Use raw sockets with --method icmp (requires root)'
    )

    parser.add_argument(
        '--format', '-f',
        choices=[f.value for f in ReportFormat],
        default=ReportFormat.TEXT.value,
        help='Output format (default: text)'
    )

    parser.add_argument(
        '--max-hosts',
        type=int,
        default=65534,
        help='Refuse networks with more hosts than this (default: 65534)'
    )

    parser.add_argument(
        '--progress',
        action='store_true',
        help='Show progress on stderr'
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Debug logging'
    )
    verbosity.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Only warnings and errors in the log'
    )

    parser.add_argument(
        '--log-file',
        help='Also write the log to this file'
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ScannerConfig:
    """Конфигурация из аргументов командной строки"""
    if args.verbose:
        log_level = "DEBUG"
    elif args.quiet:
        log_level = "WARNING"
    else:
        log_level = "INFO"

    return ScannerConfig.from_dict({
        "timeout_ms": args.timeout,
        "method": args.method,
        "privileged": args.privileged,
        "concurrent_limit": args.workers,
        "max_hosts": args.max_hosts,
        "report_format": args.format,
        "log_level": log_level,
        "log_file": args.log_file,
        "show_progress": args.progress,
    })


def main(argv: Optional[List[str]] = None, prober=None) -> int:
    """
    Основная функция

    Args:
        argv: Аргументы командной строки без имени программы
        prober: Способ проверки хоста (по умолчанию выбирается по --method)

    Returns:
        Код завершения
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        args = parse_arguments(argv)
    except UsageError:
        print(USAGE_TEXT)
        return EXIT_USAGE

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    setup_logging(config)

    try:
        spec = IPParser.parse(args.address)
        IPParser.validate_network(spec, config.max_hosts)
    except NetworkTooLargeError as e:
        print(f"Network too large: {e}. Use a narrower prefix or raise --max-hosts.")
        return EXIT_ERROR
    except ParseError as e:
        logger.debug(f"Ошибка разбора '{args.address}': {e}")
        print(INVALID_NETWORK_TEXT)
        return EXIT_ERROR

    if prober is None:
        validate_environment(config)

    scanner = AsyncPingScanner(config, prober=prober)
    try:
        results = asyncio.run(scanner.scan(spec))
    except KeyboardInterrupt:
        print("\nScan interrupted by user")
        return 130

    reporter = ReportGenerator(config)
    print(reporter.generate(results, scanner.get_summary(results)))
    return EXIT_OK


def run():
    """Точка входа для консольной команды"""
    sys.exit(main())


if __name__ == "__main__":
    run()
