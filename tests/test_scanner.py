from __future__ import annotations

import asyncio
import ipaddress

from subnet_scanner.config import ProbeResult, ProbeStatus, ScannerConfig
from subnet_scanner.ip_parser import IPParser
from subnet_scanner.scanner import AsyncPingScanner


class FakeProber:
    """Отвечает по таблице задержек; остальные адреса молчат"""

    def __init__(self, replies: dict[str, float], fail: set[str] | None = None) -> None:
        self.replies = replies
        self.fail = fail or set()
        self.calls: list[str] = []
        self.in_flight = 0
        self.peak = 0

    async def probe(self, address: ipaddress.IPv4Address, timeout_ms: int) -> ProbeResult:
        ip = str(address)
        self.calls.append(ip)
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            # ответы приходят не в порядке отправки
            await asyncio.sleep(0.001 * (5 - len(self.calls) % 5))
            if ip in self.fail:
                raise OSError('socket exploded')
            if ip in self.replies:
                return ProbeResult.success(address, self.replies[ip])
            return ProbeResult.failure(address, ProbeStatus.TIMEOUT, 'no reply')
        finally:
            self.in_flight -= 1


def _addresses(*values: str) -> list[ipaddress.IPv4Address]:
    return [ipaddress.IPv4Address(value) for value in values]


def test_probe_all_preserves_length_and_order() -> None:
    addresses = _addresses('10.0.0.5', '10.0.0.1', '10.0.0.3', '10.0.0.2')
    prober = FakeProber({'10.0.0.3': 2.4, '10.0.0.5': 7})
    scanner = AsyncPingScanner(ScannerConfig(), prober=prober)

    results = asyncio.run(scanner.probe_all(addresses))

    assert [r.address for r in results] == addresses
    assert [r.reachable for r in results] == [True, False, True, False]
    assert results[0].round_trip_ms == 7
    assert results[2].round_trip_ms == 2
    assert results[1].round_trip_ms is None


def test_probe_all_isolates_a_failing_probe() -> None:
    addresses = _addresses('10.0.0.1', '10.0.0.2', '10.0.0.3')
    prober = FakeProber({'10.0.0.1': 1, '10.0.0.3': 3}, fail={'10.0.0.2'})
    scanner = AsyncPingScanner(ScannerConfig(), prober=prober)

    results = asyncio.run(scanner.probe_all(addresses))

    assert len(results) == 3
    assert results[0].reachable and results[0].round_trip_ms == 1
    assert results[1].status is ProbeStatus.ERROR
    assert 'socket exploded' in results[1].detail
    assert results[2].reachable and results[2].round_trip_ms == 3


def test_probe_all_respects_concurrency_limit() -> None:
    spec = IPParser.parse('192.168.0.0/26')
    prober = FakeProber({})
    scanner = AsyncPingScanner(ScannerConfig(concurrent_limit=4), prober=prober)

    results = asyncio.run(scanner.scan(spec))

    assert len(results) == 62
    assert len(prober.calls) == 62
    assert prober.peak <= 4


def test_probe_all_runs_probes_concurrently() -> None:
    class SlowProber:
        def __init__(self) -> None:
            self.in_flight = 0
            self.peak = 0

        async def probe(self, address, timeout_ms):
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            await asyncio.sleep(0.05)
            self.in_flight -= 1
            return ProbeResult.failure(address, ProbeStatus.TIMEOUT)

    prober = SlowProber()
    scanner = AsyncPingScanner(ScannerConfig(), prober=prober)
    asyncio.run(scanner.scan(IPParser.parse('10.0.0.0/28')))

    assert prober.peak == 14


def test_probe_all_passes_timeout_to_prober() -> None:
    seen: list[int] = []

    class RecordingProber:
        async def probe(self, address, timeout_ms):
            seen.append(timeout_ms)
            return ProbeResult.failure(address, ProbeStatus.TIMEOUT)

    scanner = AsyncPingScanner(ScannerConfig(timeout_ms=250), prober=RecordingProber())
    asyncio.run(scanner.probe_all(_addresses('10.0.0.1')))
    asyncio.run(scanner.probe_all(_addresses('10.0.0.1'), timeout_ms=40))

    assert seen == [250, 40]


def test_probe_all_with_no_addresses() -> None:
    prober = FakeProber({})
    scanner = AsyncPingScanner(ScannerConfig(), prober=prober)

    assert asyncio.run(scanner.scan(IPParser.parse('10.0.0.0/32'))) == []
    assert prober.calls == []
    assert scanner.summary.total_hosts == 0


def test_summary_after_scan() -> None:
    prober = FakeProber({'10.0.0.1': 5})
    scanner = AsyncPingScanner(ScannerConfig(), prober=prober)

    results = asyncio.run(scanner.scan(IPParser.parse('10.0.0.0/30')))
    data = scanner.get_summary(results)

    assert scanner.summary.total_hosts == 2
    assert scanner.summary.alive_hosts == 1
    assert scanner.summary.alive_percent == 50.0
    assert data['alive_hosts'] == ['10.0.0.1']
    assert data['dead_hosts'] == ['10.0.0.2']
    assert data['latencies'] == {'10.0.0.1': 5}
    assert data['summary']['avg_latency_ms'] == 5
