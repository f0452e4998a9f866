"""
Способы отправки одного ICMP echo на хост
"""

import asyncio
import ipaddress
import logging
import platform
import re
import time
from typing import List, Optional

from icmplib import ICMPLibError, async_ping

from .config import ScannerConfig, PingMethod, ProbeResult, ProbeStatus

logger = logging.getLogger(__name__)


class SystemPingProber:
    """Проверка хоста через системную команду ping"""

    LATENCY_PATTERNS = [
        r'time[=<>](\d+\.?\d*)\s*ms',  # Стандартный формат
        r'время[=<>](\d+\.?\d*)\s*мс',  # Русская локализация
    ]

    def __init__(self, system: Optional[str] = None):
        self.system = (system or platform.system()).lower()

    def build_command(self, ip: str, timeout_ms: int) -> List[str]:
        """Построение команды ping"""
        if self.system == 'windows':
            return ['ping', '-n', '1', '-w', str(timeout_ms), ip]
        if self.system == 'darwin':
            # на macOS -W задается в миллисекундах
            return ['ping', '-c', '1', '-W', str(timeout_ms), ip]
        # Linux принимает -W только в целых секундах
        return ['ping', '-c', '1', '-W', str(max(1, -(-timeout_ms // 1000))), ip]

    @classmethod
    def extract_latency(cls, output: str) -> Optional[float]:
        """Извлечение времени отклика из вывода ping"""
        for pattern in cls.LATENCY_PATTERNS:
            matches = re.findall(pattern, output, re.IGNORECASE)
            if matches:
                return float(matches[-1])
        return None

    async def probe(self, address: ipaddress.IPv4Address, timeout_ms: int) -> ProbeResult:
        """
        Выполнение ping для одного IP

        Returns:
            Результат проверки; ошибки возвращаются как статус, а не исключение
        """
        ip = str(address)
        cmd = self.build_command(ip, timeout_ms)
        started = time.perf_counter()

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL
            )
        except OSError as e:
            logger.debug(f"Не удалось запустить ping для {ip}: {e}")
            return ProbeResult.failure(address, ProbeStatus.ERROR, str(e))

        try:
            # даем процессу немного больше времени, чем его собственный таймаут
            stdout, _ = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout_ms / 1000 + 1
            )
        except asyncio.TimeoutError:
            return ProbeResult.failure(address, ProbeStatus.TIMEOUT, "no reply")
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()

        elapsed_ms = (time.perf_counter() - started) * 1000
        if process.returncode != 0:
            return ProbeResult.failure(address, ProbeStatus.UNREACHABLE,
                                       f"ping exited with code {process.returncode}")

        latency = self.extract_latency(stdout.decode('utf-8', errors='ignore'))
        if latency is None:
            latency = elapsed_ms
        if latency > timeout_ms:
            return ProbeResult.failure(address, ProbeStatus.TIMEOUT, f"reply after {latency:.0f} ms")
        return ProbeResult.success(address, latency)


class IcmpProber:
    """Проверка хоста через сокет ICMP (icmplib)"""

    def __init__(self, privileged: bool = False):
        self.privileged = privileged

    async def probe(self, address: ipaddress.IPv4Address, timeout_ms: int) -> ProbeResult:
        ip = str(address)
        try:
            host = await async_ping(
                ip,
                count=1,
                timeout=timeout_ms / 1000,
                privileged=self.privileged
            )
        except ICMPLibError as e:
            logger.debug(f"Ошибка ICMP для {ip}: {e}")
            return ProbeResult.failure(address, ProbeStatus.ERROR, str(e))

        if not host.is_alive:
            return ProbeResult.failure(address, ProbeStatus.TIMEOUT, "no reply")
        return ProbeResult.success(address, host.avg_rtt)


def build_prober(config: ScannerConfig):
    """Выбор способа проверки по конфигурации"""
    if config.method is PingMethod.ICMP:
        return IcmpProber(privileged=config.privileged)
    return SystemPingProber()
