"""
Модуль конфигурации и моделей данных
"""

import ipaddress
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any, Optional, List, Tuple, Sequence


class ReportFormat(Enum):
    """Формат отчета"""
    TEXT = "text"
    JSON = "json"
    CSV = "csv"


class PingMethod(Enum):
    """Способ отправки ICMP echo"""
    PING = "ping"    # системная команда ping
    ICMP = "icmp"    # сокеты через icmplib


class ProbeStatus(Enum):
    """Результат проверки ping"""
    SUCCESS = "success"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    ERROR = "error"


@dataclass
class ScannerConfig:
    """Конфигурация сканера с валидацией"""

    # Параметры ping
    timeout_ms: int = 1000
    method: PingMethod = PingMethod.PING
    privileged: bool = False

    # Параметры производительности
    concurrent_limit: int = 256
    max_hosts: int = 65534  # одна сеть /16

    # Настройки вывода
    report_format: ReportFormat = ReportFormat.TEXT
    log_level: str = "INFO"
    log_file: Optional[str] = None
    show_progress: bool = False

    def __post_init__(self):
        """Валидация значений после инициализации"""
        self._validate_values()

    def _validate_values(self):
        """Проверка корректности значений"""
        if self.timeout_ms <= 0:
            raise ValueError("timeout must be a positive number of milliseconds")
        if self.concurrent_limit <= 0:
            raise ValueError("workers must be a positive number")
        if self.max_hosts <= 0:
            raise ValueError("max-hosts must be a positive number")

        # Проверка log_level
        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(f"log level must be one of: {valid_log_levels}")

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в словарь"""
        data = asdict(self)
        data["method"] = self.method.value
        data["report_format"] = self.report_format.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScannerConfig":
        """Создание из словаря"""
        data = dict(data)

        # Преобразуем строковые значения в Enum
        if "report_format" in data and isinstance(data["report_format"], str):
            try:
                data["report_format"] = ReportFormat(data["report_format"].lower())
            except ValueError:
                data["report_format"] = ReportFormat.TEXT

        if "method" in data and isinstance(data["method"], str):
            try:
                data["method"] = PingMethod(data["method"].lower())
            except ValueError:
                raise ValueError(f"unknown ping method: {data['method']}")

        return cls(**data)


@dataclass(frozen=True)
class NetworkSpec:
    """Разобранная запись CIDR: базовый адрес и длина префикса"""
    base_address: ipaddress.IPv4Address
    prefix_length: int

    def __post_init__(self):
        if not 0 <= self.prefix_length <= 32:
            raise ValueError(f"prefix length out of range: {self.prefix_length}")

    @property
    def octets(self) -> Tuple[int, int, int, int]:
        return tuple(self.base_address.packed)

    @property
    def network(self) -> ipaddress.IPv4Network:
        """Сеть, содержащая базовый адрес (биты хоста сброшены)"""
        return ipaddress.IPv4Network(f"{self.base_address}/{self.prefix_length}", strict=False)

    @property
    def host_count(self) -> int:
        """Количество рабочих адресов без адреса сети и broadcast"""
        return max(0, 2 ** (32 - self.prefix_length) - 2)

    def __str__(self) -> str:
        return f"{self.base_address}/{self.prefix_length}"


@dataclass(frozen=True)
class ProbeResult:
    """Результат проверки одного хоста"""
    address: ipaddress.IPv4Address
    status: ProbeStatus
    round_trip_ms: Optional[int] = None
    detail: Optional[str] = None

    @property
    def reachable(self) -> bool:
        return self.status is ProbeStatus.SUCCESS

    @classmethod
    def success(cls, address: ipaddress.IPv4Address, round_trip_ms: float) -> "ProbeResult":
        return cls(address=address, status=ProbeStatus.SUCCESS,
                   round_trip_ms=int(round(round_trip_ms)))

    @classmethod
    def failure(cls, address: ipaddress.IPv4Address, status: ProbeStatus,
                detail: Optional[str] = None) -> "ProbeResult":
        if status is ProbeStatus.SUCCESS:
            raise ValueError("failure result cannot carry SUCCESS status")
        return cls(address=address, status=status, detail=detail)

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование в словарь для JSON"""
        return {
            "ip": str(self.address),
            "reachable": self.reachable,
            "status": self.status.value,
            "round_trip_ms": self.round_trip_ms,
            "detail": self.detail,
        }


@dataclass
class ScanSummary:
    """Сводка по сканированию"""
    total_hosts: int = 0
    alive_hosts: int = 0
    dead_hosts: int = 0
    scan_duration: float = 0.0

    @classmethod
    def from_results(cls, results: Sequence[ProbeResult], duration: float = 0.0) -> "ScanSummary":
        alive = sum(1 for result in results if result.reachable)
        return cls(
            total_hosts=len(results),
            alive_hosts=alive,
            dead_hosts=len(results) - alive,
            scan_duration=duration,
        )

    @property
    def alive_percent(self) -> float:
        """Процент доступных хостов"""
        if self.total_hosts == 0:
            return 0.0
        return (self.alive_hosts / self.total_hosts) * 100

    @property
    def dead_percent(self) -> float:
        """Процент недоступных хостов"""
        if self.total_hosts == 0:
            return 0.0
        return (self.dead_hosts / self.total_hosts) * 100

    def to_dict(self, results: List[ProbeResult]) -> Dict[str, Any]:
        """Сводка в формате отчета"""
        latencies = [r.round_trip_ms for r in results if r.reachable and r.round_trip_ms is not None]
        avg_latency = sum(latencies) / len(latencies) if latencies else 0

        return {
            "total": self.total_hosts,
            "alive": self.alive_hosts,
            "dead": self.dead_hosts,
            "alive_percent": self.alive_percent,
            "dead_percent": self.dead_percent,
            "avg_latency_ms": round(avg_latency, 2),
            "scan_duration_seconds": round(self.scan_duration, 2),
        }
