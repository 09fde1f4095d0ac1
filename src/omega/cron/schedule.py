"""Pool of scheduled tasks."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from omega.cron.interpolate import Interpolator
from omega.cron.schedule_time import ScheduleTime
from omega.cron.schedule_time import TaskParams
from omega.cron.schedule_time import TimeLike
from omega.cron.schedule_time import to_datetime


class Schedule:
    """
    Collects tasks and runs those due at the reference time.

    Example::

        schedule = Schedule()
        schedule.call(cleanup_sessions).every_ten_minute().set_event_name('sessions')
        schedule.call(send_report, {'channel': 'ops'}).daily().retry(3)
        schedule.execute()
    """

    def __init__(self, time: TimeLike | None = None, logger: Interpolator | None = None) -> None:
        """
        Initialize the pool.

        Args:
            time: Reference time for new tasks; the current time at
                ``call()`` when omitted
            logger: Receiver of task reports
        """
        self._time = None if time is None else to_datetime(time)
        self._logger = logger
        self._pools: list[ScheduleTime] = []

    def get_pools(self) -> list[ScheduleTime]:
        return self._pools

    def call(self, callback: Callable[..., Any], params: TaskParams = None) -> ScheduleTime:
        """
        Register a task.

        Args:
            callback: Task; receives ``params`` as keyword arguments when it
                is a mapping, as positional arguments otherwise
            params: Task arguments

        Returns:
            The task entry, due at the reference minute until another time
            shorthand is applied
        """
        entry = ScheduleTime(callback, params, self._time or datetime.now())
        self._pools.append(entry)
        return entry

    def execute(self) -> None:
        """
        Run every due task.

        A failing task is run again in the same pass while it has retry
        attempts left; ``retry_if`` adds one more run afterwards. Task
        failures never stop the remaining tasks.
        """
        for cron in self._pools:
            cron.set_logger(self._logger)
            ran = cron.expect()
            while ran and cron.attempts > 0:
                ran = cron.expect()
            if cron.is_retry():
                cron.expect()

    def set_logger(self, logger: Interpolator) -> None:
        self._logger = logger

    def set_time(self, time: TimeLike) -> None:
        self._time = to_datetime(time)

    def add(self, schedule: 'Schedule') -> 'Schedule':
        """Take over the tasks of another schedule."""
        self._pools.extend(schedule.get_pools())
        return self

    def flush(self) -> None:
        self._pools = []
