"""
Вспомогательные утилиты
"""

import sys
import shutil
import logging

from .config import ScannerConfig, PingMethod

PACKAGE_LOGGER = "subnet_scanner"


def setup_logging(config: ScannerConfig) -> logging.Logger:
    """
    Настройка логирования

    Stdout занят отчетом, поэтому консольный вывод логов идет в stderr.

    Args:
        config: Конфигурация сканера
    """
    # Уровень логирования
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    # Формат сообщений
    log_format = '%(asctime)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    logger = logging.getLogger(PACKAGE_LOGGER)

    # Очищаем существующие обработчики
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format, date_format)

    # Консольный обработчик
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    # Файловый обработчик
    if config.log_file:
        file_handler = logging.FileHandler(config.log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        logger.addHandler(file_handler)

    logger.setLevel(log_level)
    logger.propagate = False

    # Отключаем логирование для некоторых библиотек
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    return logger


def validate_environment(config: ScannerConfig) -> bool:
    """
    Проверка окружения

    Returns:
        True если выбранный способ проверки доступен
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    if config.method is PingMethod.PING and shutil.which('ping') is None:
        logger.warning("Команда 'ping' не найдена, все хосты будут помечены как недоступные")
        return False

    return True
