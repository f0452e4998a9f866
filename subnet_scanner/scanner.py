"""
Модуль асинхронного сканера
"""

import asyncio
import ipaddress
import logging
import sys
import time
from typing import Dict, List, Optional, Sequence

from .config import ScannerConfig, NetworkSpec, ProbeResult, ProbeStatus, ScanSummary
from .ip_parser import IPParser
from .probes import build_prober

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Трекер прогресса сканирования"""

    def __init__(self, total: int, show_progress: bool = True, stream=None):
        self.total = total
        self.completed = 0
        self.show_progress = show_progress
        self.stream = stream or sys.stderr
        self.start_time = time.time()
        self.last_update = 0
        self.update_interval = 1.0  # Обновлять не чаще чем раз в секунду

    def update(self, count: int = 1):
        """Обновить прогресс"""
        self.completed += count
        current_time = time.time()

        if self.show_progress and current_time - self.last_update >= self.update_interval:
            self._display()
            self.last_update = current_time

    def _display(self):
        """Отобразить прогресс"""
        elapsed = time.time() - self.start_time
        percent = (self.completed / self.total * 100) if self.total > 0 else 0

        ips_per_sec = self.completed / elapsed if elapsed > 0 else 0.0
        print(f"\rProgress: {self.completed}/{self.total} ({percent:.1f}%) | "
              f"{ips_per_sec:.1f} IP/s", end="", file=self.stream, flush=True)

    def finish(self):
        """Завершить отображение прогресса"""
        if self.show_progress:
            self._display()
            print(file=self.stream)


class AsyncPingScanner:
    """Асинхронный сканер IP-адресов"""

    def __init__(self, config: ScannerConfig, prober=None):
        self.config = config
        self.prober = prober if prober is not None else build_prober(config)
        self.summary = ScanSummary()
        self._progress: Optional[ProgressTracker] = None

    async def _probe_one(self, semaphore: asyncio.Semaphore,
                         address: ipaddress.IPv4Address, timeout_ms: int) -> ProbeResult:
        """Проверка одного хоста под ограничением одновременных запросов"""
        async with semaphore:
            result = await self.prober.probe(address, timeout_ms)

        logger.debug(f"{address}: {result.status.value}"
                     + (f" ({result.round_trip_ms} мс)" if result.reachable else ""))
        if self._progress:
            self._progress.update()
        return result

    async def probe_all(self, addresses: Sequence[ipaddress.IPv4Address],
                        timeout_ms: Optional[int] = None) -> List[ProbeResult]:
        """
        Проверка всех адресов

        Args:
            addresses: Адреса для проверки
            timeout_ms: Таймаут одной проверки (по умолчанию из конфигурации)

        Returns:
            Результаты в том же порядке, что и адреса
        """
        addresses = list(addresses)
        if timeout_ms is None:
            timeout_ms = self.config.timeout_ms

        start_time = time.time()
        if not addresses:
            self.summary = ScanSummary()
            return []

        logger.info(f"Начинаем сканирование {len(addresses)} хостов "
                    f"(одновременно: {self.config.concurrent_limit}, таймаут: {timeout_ms} мс)")

        self._progress = ProgressTracker(
            total=len(addresses),
            show_progress=self.config.show_progress
        )

        # Семафор создается здесь, чтобы он принадлежал текущему циклу событий
        semaphore = asyncio.Semaphore(self.config.concurrent_limit)
        tasks = [self._probe_one(semaphore, address, timeout_ms) for address in addresses]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: List[ProbeResult] = []
        for address, outcome in zip(addresses, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"Ошибка при сканировании {address}: {outcome}")
                outcome = ProbeResult.failure(address, ProbeStatus.ERROR, str(outcome))
            results.append(outcome)

        self._progress.finish()
        self._progress = None

        self.summary = ScanSummary.from_results(results, time.time() - start_time)
        logger.info(f"Сканирование завершено за {self.summary.scan_duration:.1f} секунд")
        logger.info(f"Результаты: {self.summary.alive_hosts} доступно, "
                    f"{self.summary.dead_hosts} недоступно")
        return results

    async def scan(self, spec: NetworkSpec) -> List[ProbeResult]:
        """Сканирование всех хостов сети"""
        return await self.probe_all(IPParser.enumerate_hosts(spec))

    def get_summary(self, results: List[ProbeResult]) -> Dict:
        """Получить сводку по сканированию"""
        return {
            "summary": self.summary.to_dict(results),
            "alive_hosts": [str(r.address) for r in results if r.reachable],
            "dead_hosts": [str(r.address) for r in results if not r.reachable],
            "latencies": {
                str(r.address): r.round_trip_ms
                for r in results
                if r.reachable and r.round_trip_ms is not None
            },
        }
