"""
Асинхронный сканер доступности хостов подсети
"""

__version__ = "1.0.0"
__author__ = "IP Scanner Team"

from .config import ScannerConfig, NetworkSpec, ProbeResult, ProbeStatus
from .ip_parser import IPParser, ParseError, NetworkTooLargeError
from .scanner import AsyncPingScanner
from .reporter import ReportGenerator
