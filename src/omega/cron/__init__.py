"""Cron-style task scheduler."""

from omega.cron.interpolate import Interpolator
from omega.cron.interpolate import NullInterpolator
from omega.cron.interpolate import StructlogInterpolator
from omega.cron.schedule import Schedule
from omega.cron.schedule_time import ScheduleTime
from omega.cron.schedule_time import TimeExpect

__all__ = [
    'Interpolator',
    'NullInterpolator',
    'Schedule',
    'ScheduleTime',
    'StructlogInterpolator',
    'TimeExpect',
]
