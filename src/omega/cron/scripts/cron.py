#!/usr/bin/env python3
"""Console script to run scheduled tasks."""

import importlib
import time
from datetime import datetime
from typing import Annotated

import typer

from omega.cron.interpolate import StructlogInterpolator
from omega.cron.schedule import Schedule
from omega.database.logging_config import configure_logging

app = typer.Typer(help='Run and inspect scheduled tasks.')

ScheduleOption = Annotated[
    str,
    typer.Option(
        '--schedule',
        '-s',
        help='Schedule as module:attribute (a Schedule, or a callable receiving a fresh Schedule)',
    ),
]
LogLevelOption = Annotated[
    str | None,
    typer.Option('--log-level', help='Logging level (DEBUG, INFO, WARNING, ERROR), OMEGA_DB_LOG_LEVEL by default'),
]


def load_schedule(reference: str, require_callable: bool = False) -> Schedule:
    """
    Resolve ``module:attribute`` into a populated schedule.

    Args:
        reference: Import path of a ``Schedule`` instance or of a callable
            that registers tasks on the schedule it receives
        require_callable: Reject ``Schedule`` instances; their tasks keep
            the reference time they were registered with

    Returns:
        Schedule ready to execute

    Raises:
        typer.BadParameter: If the reference cannot be resolved
    """
    module_name, _, attribute = reference.partition(':')
    if not module_name or not attribute:
        msg = f'Expected module:attribute, got "{reference}"'
        raise typer.BadParameter(msg, param_hint='--schedule')

    try:
        target = getattr(importlib.import_module(module_name), attribute)
    except (ImportError, AttributeError) as e:
        msg = f'Cannot load "{reference}": {e}'
        raise typer.BadParameter(msg, param_hint='--schedule') from e

    if isinstance(target, Schedule):
        if require_callable:
            msg = f'"{reference}" is a Schedule instance, a callable registering the tasks is required'
            raise typer.BadParameter(msg, param_hint='--schedule')
        return target
    if callable(target):
        schedule = Schedule()
        target(schedule)
        return schedule

    msg = f'"{reference}" is neither a Schedule nor a callable'
    raise typer.BadParameter(msg, param_hint='--schedule')


def _run_once(reference: str, require_callable: bool = False) -> float:
    schedule = load_schedule(reference, require_callable)
    schedule.set_logger(StructlogInterpolator())
    start = time.perf_counter()
    schedule.execute()
    return round((time.perf_counter() - start) * 1000, 3)


@app.command()
def run(schedule: ScheduleOption, log_level: LogLevelOption = None) -> None:
    """Run every task due now."""
    configure_logging(log_level)
    elapsed = _run_once(schedule)
    typer.echo('done in ' + typer.style(f'{elapsed}ms', fg=typer.colors.GREEN))


@app.command('list')
def list_tasks(schedule: ScheduleOption, log_level: LogLevelOption = None) -> None:
    """List registered tasks with their time rules."""
    configure_logging(log_level)
    pools = load_schedule(schedule).get_pools()
    width = max((len(cron.time_name) for cron in pools), default=0) + 1

    for cron in pools:
        colour = typer.colors.BRIGHT_BLACK if cron.is_anonymously() else typer.colors.GREEN
        typer.echo(
            '#'
            + typer.style(cron.time_name.ljust(width), fg=colour)
            + typer.style(cron.event_name, fg=typer.colors.YELLOW),
        )
    typer.echo(f'{len(pools)} task(s)')


@app.command()
def work(
    schedule: ScheduleOption,
    log_level: LogLevelOption = None,
    interval: Annotated[int, typer.Option('--interval', help='Seconds between passes')] = 60,
    max_runs: Annotated[int, typer.Option('--max-runs', help='Stop after this many passes (0 runs forever)')] = 0,
) -> None:
    """
    Run the schedule in the foreground, once per interval.

    The schedule is registered anew on every pass so each pass checks the
    tasks against the current time.
    """
    configure_logging(log_level)
    typer.secho('Simulate cron in terminal', fg=typer.colors.BLUE)
    typer.secho('type ctrl+c to stop', fg=typer.colors.GREEN, underline=True)

    runs = 0
    try:
        while max_runs == 0 or runs < max_runs:
            started = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
            elapsed = _run_once(schedule, require_callable=True)
            typer.echo(
                typer.style(f'Run cron at - {started}', dim=True)
                + ' -> '
                + typer.style(f'{elapsed}ms', fg=typer.colors.YELLOW),
            )
            runs += 1
            if max_runs == 0 or runs < max_runs:
                time.sleep(interval)
    except KeyboardInterrupt:
        typer.echo('stopped')


def main() -> None:
    """Entry point for the script."""
    app()


if __name__ == '__main__':
    main()
