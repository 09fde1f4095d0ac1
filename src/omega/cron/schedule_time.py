"""A scheduled task and its time rules."""

from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from time import perf_counter
from typing import Any
from typing import Self

import structlog

from omega.cron.interpolate import Interpolator
from omega.cron.interpolate import NullInterpolator

logger = structlog.get_logger(__name__)

DAY_LETTERS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
ANONYMOUS_EVENT = 'anonymously'

TimeLike = datetime | int | float
TaskParams = Mapping[str, Any] | Sequence[Any] | None


def to_datetime(value: TimeLike) -> datetime:
    """Accept a datetime or a unix timestamp (local time)."""
    if isinstance(value, datetime):
        return value
    return datetime.fromtimestamp(value)


def weekday_letter(moment: datetime) -> str:
    return DAY_LETTERS[moment.weekday()]


@dataclass(slots=True, frozen=True)
class TimeExpect:
    """
    One moment a task may run at.

    All fields must match; ``day_letter`` None matches any day of the week.
    """

    day: int
    hour: int
    minute: int
    day_letter: str | None = None

    def matches(self, moment: datetime) -> bool:
        return (
            (self.day_letter is None or self.day_letter == weekday_letter(moment))
            and self.day == moment.day
            and self.hour == moment.hour
            and self.minute == moment.minute
        )


class ScheduleTime:
    """
    Task registered on a ``Schedule``.

    The time rules are a list of ``TimeExpect`` alternatives built
    relative to the reference time, and the task is due when any of them
    matches that time at minute resolution.
    """

    def __init__(self, callback: Callable[..., Any], params: TaskParams, time: TimeLike) -> None:
        self._callback = callback
        self._params = params
        self._time = to_datetime(time)
        self._event_name = ANONYMOUS_EVENT
        self._time_name = ''
        self._anonymously = False
        self._is_fail = False
        self._retry_attempts = 0
        self._retry_condition = False
        self._skip = False
        self._logger: Interpolator = NullInterpolator()
        self._time_expect = [self._just_in_time_expect()]

    @property
    def time(self) -> datetime:
        return self._time

    def set_event_name(self, name: str) -> Self:
        self._event_name = name
        return self

    def anonymously(self, run_as_anonymously: bool = True) -> Self:
        """Do not report runs of this task."""
        self._anonymously = run_as_anonymously
        return self

    def is_anonymously(self) -> bool:
        return self._anonymously

    @property
    def event_name(self) -> str:
        return self._event_name

    @property
    def time_name(self) -> str:
        return self._time_name

    @property
    def time_expect(self) -> list[TimeExpect]:
        return list(self._time_expect)

    def is_fail(self) -> bool:
        return self._is_fail

    @property
    def attempts(self) -> int:
        """Runs left before the task is given up for this pass."""
        return self._retry_attempts

    def retry(self, attempts: int) -> Self:
        self._retry_attempts = attempts
        return self

    def retry_if(self, condition: bool) -> Self:
        """Run the task once more after the retry loop."""
        self._retry_condition = condition
        return self

    def is_retry(self) -> bool:
        return self._retry_condition

    def skip(self, skip_when: bool | Callable[[], bool]) -> Self:
        """
        Skip the task.

        Args:
            skip_when: Flag, or callable evaluated right away

        Returns:
            Self for chaining
        """
        self._skip = bool(skip_when() if callable(skip_when) else skip_when)
        return self

    def set_logger(self, interpolator: Interpolator | None) -> None:
        self._logger = interpolator or NullInterpolator()

    def is_due(self, at: TimeLike | None = None) -> bool:
        """
        Check the time rules.

        Args:
            at: Moment to check, defaults to the reference time

        Returns:
            True if any alternative matches the moment
        """
        moment = self._time if at is None else to_datetime(at)
        return any(expect.matches(moment) for expect in self._time_expect)

    def _call(self) -> Any:  # noqa: ANN401
        if isinstance(self._params, Mapping):
            return self._callback(**self._params)
        return self._callback(*(self._params or ()))

    def expect(self) -> bool:
        """
        Run the task if it is due and not skipped.

        A successful run clears the retry counter, a failing one decrements
        it and marks the task as failed. Task exceptions never propagate.

        Returns:
            True if the task ran, successfully or not
        """
        if self._skip or not self.is_due():
            return False

        start = perf_counter()
        try:
            output = self._call()
            if output is None:
                output = {}
            self._retry_attempts = 0
            self._is_fail = False
        except Exception as e:
            self._retry_attempts -= 1
            self._is_fail = True
            output = {'error': str(e)}
            logger.warning(
                'cron_task_failed',
                event_name=self._event_name,
                error=str(e),
                attempts=self._retry_attempts,
            )
        elapsed = round((perf_counter() - start) * 1000, 3)

        if not self._anonymously:
            self._logger.interpolate(
                self._event_name,
                {
                    'execute_time': elapsed,
                    'cron_time': int(self._time.timestamp()),
                    'event_name': self._event_name,
                    'attempts': self._retry_attempts,
                    'error_message': output,
                },
            )
        return True

    def _just_in_time_expect(self) -> TimeExpect:
        return TimeExpect(self._time.day, self._time.hour, self._time.minute, weekday_letter(self._time))

    def _set_expect(self, time_name: str, expects: list[TimeExpect]) -> Self:
        self._time_name = time_name
        self._time_expect = expects
        return self

    def just_in_time(self) -> Self:
        """Due at the reference minute only."""
        return self._set_expect('just_in_time', [self._just_in_time_expect()])

    def every_ten_minute(self) -> Self:
        day, hour = self._time.day, self._time.hour
        return self._set_expect('every_ten_minute', [TimeExpect(day, hour, minute) for minute in range(0, 60, 10)])

    def every_thirty_minutes(self) -> Self:
        day, hour = self._time.day, self._time.hour
        return self._set_expect('every_thirty_minutes', [TimeExpect(day, hour, 0), TimeExpect(day, hour, 30)])

    def every_two_hour(self) -> Self:
        day = self._time.day
        return self._set_expect('every_two_hour', [TimeExpect(day, hour, 0) for hour in range(0, 24, 2)])

    def every_twelve_hour(self) -> Self:
        day = self._time.day
        return self._set_expect('every_twelve_hour', [TimeExpect(day, 0, 0), TimeExpect(day, 12, 0)])

    def hourly(self) -> Self:
        day = self._time.day
        return self._set_expect('hourly', [TimeExpect(day, hour, 0) for hour in range(24)])

    def hourly_at(self, hour24: int) -> Self:
        return self._set_expect('hourly_at', [TimeExpect(self._time.day, hour24, 0)])

    def daily(self) -> Self:
        """Due at midnight of the reference day."""
        return self._set_expect('daily', [TimeExpect(self._time.day, 0, 0)])

    def daily_at(self, day: int) -> Self:
        """Due at midnight of the given day of the month."""
        return self._set_expect('daily_at', [TimeExpect(day, 0, 0)])

    def weekly(self) -> Self:
        """Due at midnight when the reference day is a Sunday."""
        return self._set_expect('weekly', [TimeExpect(self._time.day, 0, 0, 'Sun')])

    def monthly(self) -> Self:
        return self._set_expect('monthly', [TimeExpect(1, 0, 0)])
