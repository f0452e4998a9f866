"""
Модуль для генерации отчетов
"""

import csv
import io
import json
from datetime import datetime
from typing import Dict, List

from . import __version__
from .config import ScannerConfig, ReportFormat, ProbeResult

TABLE_HEADER = "IP Address\t\tStatus\t\tRoundtrip Time (ms)"
TABLE_SEPARATOR = "-" * 52


class ReportGenerator:
    """Генератор отчетов"""

    def __init__(self, config: ScannerConfig):
        self.config = config

    def generate(self, results: List[ProbeResult], scan_data: Dict) -> str:
        """
        Генерация отчета

        Args:
            results: Результаты проверки в порядке адресов
            scan_data: Сводка сканирования

        Returns:
            Строка с отчетом
        """
        format_methods = {
            ReportFormat.TEXT: self._generate_text,
            ReportFormat.JSON: self._generate_json,
            ReportFormat.CSV: self._generate_csv,
        }

        method = format_methods.get(self.config.report_format, self._generate_text)
        return method(results, scan_data)

    def _generate_text(self, results: List[ProbeResult], scan_data: Dict) -> str:
        """Таблица только с доступными хостами"""
        report_lines = [TABLE_HEADER, TABLE_SEPARATOR]

        for result in results:
            if result.reachable:
                report_lines.append(f"{result.address}\t\tActive\t\t{result.round_trip_ms}")

        return "\n".join(report_lines)

    def _generate_json(self, results: List[ProbeResult], scan_data: Dict) -> str:
        """Генерация JSON отчета"""
        full_report = {
            "metadata": {
                "generated_at": datetime.now().isoformat(),
                "config": self.config.to_dict(),
                "scanner_version": __version__
            },
            "summary": scan_data.get("summary", {}),
            "results": [result.to_dict() for result in results]
        }

        return json.dumps(full_report, indent=2, ensure_ascii=False)

    def _generate_csv(self, results: List[ProbeResult], scan_data: Dict) -> str:
        """Генерация CSV отчета"""
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")

        writer.writerow(["IP Address", "Status", "Roundtrip Time (ms)"])
        for result in results:
            rtt = "" if result.round_trip_ms is None else result.round_trip_ms
            writer.writerow([str(result.address), result.status.value, rtt])

        return output.getvalue()
