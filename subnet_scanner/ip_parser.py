"""
Модуль для парсинга сети в нотации CIDR и перебора адресов хостов
"""

import ipaddress
import logging
from typing import Iterator

from .config import NetworkSpec

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Некорректная запись сети"""


class NetworkTooLargeError(ParseError):
    """Сеть содержит больше хостов, чем разрешено"""


class IPParser:
    """Парсер сети CIDR"""

    @staticmethod
    def _parse_number(value: str, upper: int, what: str) -> int:
        # isdigit() пропускает и не-ASCII цифры, поэтому отдельно isascii()
        if not value or not value.isascii() or not value.isdigit():
            raise ParseError(f"{what} is not a number: '{value}'")
        number = int(value)
        if number > upper:
            raise ParseError(f"{what} out of range 0-{upper}: {number}")
        return number

    @classmethod
    def parse(cls, spec: str) -> NetworkSpec:
        """
        Парсинг строки вида 192.168.1.0/24

        Args:
            spec: Строка с сетью

        Returns:
            Разобранная сеть

        Raises:
            ParseError: если строка не является корректной записью CIDR
        """
        line = spec.strip()

        parts = line.split('/')
        if len(parts) != 2:
            raise ParseError(f"expected '<address>/<prefix>', got '{spec}'")
        address, mask = parts

        octets = address.split('.')
        if len(octets) != 4:
            raise ParseError(f"address must have 4 octets: '{address}'")

        values = [cls._parse_number(octet, 255, "octet") for octet in octets]
        prefix_length = cls._parse_number(mask, 32, "prefix length")

        base = ipaddress.IPv4Address(bytes(values))
        logger.debug(f"Разобрана сеть {base}/{prefix_length}")
        return NetworkSpec(base_address=base, prefix_length=prefix_length)

    @staticmethod
    def host_count(spec: NetworkSpec) -> int:
        """Количество рабочих адресов (0 для /31 и /32)"""
        return spec.host_count

    @classmethod
    def enumerate_hosts(cls, spec: NetworkSpec) -> Iterator[ipaddress.IPv4Address]:
        """
        Перебор адресов хостов по возрастанию

        Для /24 и уже первые три октета базового адреса не меняются,
        последний идет от 1 до количества хостов. Для сетей шире /24 перебор
        начинается от адреса сети и переходит через границу октета.

        Args:
            spec: Разобранная сеть

        Returns:
            Новый итератор при каждом вызове
        """
        if spec.prefix_length >= 24:
            first = ipaddress.IPv4Address(bytes(spec.octets[:3]) + b'\x00')
        else:
            first = spec.network.network_address
        count = cls.host_count(spec)
        return (first + offset for offset in range(1, count + 1))

    @classmethod
    def validate_network(cls, spec: NetworkSpec, max_hosts: int) -> None:
        """
        Проверка размера сети перед сканированием

        Raises:
            NetworkTooLargeError: если хостов больше max_hosts
        """
        count = cls.host_count(spec)
        if count > max_hosts:
            raise NetworkTooLargeError(
                f"network {spec} has {count} hosts, limit is {max_hosts}"
            )
        if count == 0:
            logger.warning(f"В сети {spec} нет адресов хостов для сканирования")
