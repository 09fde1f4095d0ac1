"""Receivers of scheduled task reports."""

from typing import Any
from typing import Protocol

import structlog


class Interpolator(Protocol):
    """Anything that accepts a task report."""

    def interpolate(self, message: str, context: dict[str, Any]) -> None:
        ...


class NullInterpolator:
    """Discards every report."""

    def interpolate(self, message: str, context: dict[str, Any]) -> None:
        return None


class StructlogInterpolator:
    """
    Forwards task reports to structlog.

    Failed runs (``error_message`` holding an ``error`` key) are logged as
    warnings, everything else at info level.
    """

    def __init__(self, logger_name: str = 'omega.cron') -> None:
        self._logger = structlog.get_logger(logger_name)

    def interpolate(self, message: str, context: dict[str, Any]) -> None:
        output = context.get('error_message')
        if isinstance(output, dict) and 'error' in output:
            self._logger.warning('cron_task_report', task=message, **context)
        else:
            self._logger.info('cron_task_report', task=message, **context)
