"""Logging setup for migration runs.

Every line names where it came from: the strategy or component that logged
it and, for repository-scoped work, the ``owner/name`` being reconciled.
Use ``{origin}`` in a custom format to place that label.
"""

import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from loguru import logger

CONSOLE_FORMAT = (
    '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | '
    '<level>{level: <8}</level> | '
    '<cyan>{origin}</cyan> | '
    '<level>{message}</level>'
)

FILE_FORMAT = '{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {origin} | {message}'


def record_origin(record: Dict[str, Any]) -> str:
    """Label a log record with the strategy or component that emitted it."""
    extra = record['extra']
    origin = extra.get('strategy') or extra.get('component') or record['name']
    repository = extra.get('repository')
    if repository:
        origin = f'{origin}[{repository}]'
    return origin


def _formatter(template: str, markup: bool) -> Callable[[Dict[str, Any]], str]:
    if '{exception}' not in template:
        template = template + '\n{exception}'

    def format_record(record: Dict[str, Any]) -> str:
        # The label is substituted into the template, so it must not be
        # read back as a format field or a color tag.
        origin = record_origin(record).replace('{', '{{').replace('}', '}}')
        if markup:
            origin = origin.replace('<', r'\<')
        return template.replace('{origin}', origin)

    return format_record


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Setup logging configuration using loguru.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path, rotated at 10 MB
        log_format: Optional custom format for both sinks
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format=_formatter(log_format or CONSOLE_FORMAT, markup=log_format is None),
        level=level,
        colorize=log_format is None,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=_formatter(log_format or FILE_FORMAT, markup=False),
            level=level,
            rotation='10 MB',
            retention='30 days',
            compression='gz',
            backtrace=True,
            diagnose=False,
        )

    logger.info(f'Logging initialized with level: {level}')
    if log_file:
        logger.info(f'Log file: {log_file}')
