"""CLI commands for the election window and results.

Mirrors the admin panel's election controls: inspect status, set the
window, start now, extend, stop, and print the tabulated results.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Annotated, TypeVar

import typer

from ballot_api.lib.election_status import as_utc

if TYPE_CHECKING:
    from ballot_api.models.election_config import ElectionConfig
    from ballot_api.schemas.results import PositionSummaryResponse

election_app = typer.Typer()

T = TypeVar("T")


def _parse_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    try:
        return as_utc(datetime.fromisoformat(value))
    except ValueError as e:
        raise typer.BadParameter(f"Invalid ISO 8601 timestamp: {value!r}") from e


async def _with_session(action: Callable[..., Awaitable[T]]) -> T:
    """Run ``action(session)`` against a freshly initialised engine."""
    from ballot_api.core.config import get_settings
    from ballot_api.core.database import dispose_engine, get_session_factory, init_engine

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    try:
        factory = get_session_factory()
        async with factory() as session:
            return await action(session)
    finally:
        await dispose_engine()


def _echo_config(config: "ElectionConfig") -> None:
    typer.echo(f"Start:   {as_utc(config.start_time).isoformat()}")
    typer.echo(f"End:     {as_utc(config.end_time).isoformat()}")
    typer.echo(f"Active:  {config.is_active}")


@election_app.command("status")
def status() -> None:
    """Show the election status and countdown."""
    asyncio.run(_status_impl())


async def _status_impl() -> None:
    from ballot_api.lib.election_status import countdown_to_end
    from ballot_api.services.election_config_service import get_status

    now = datetime.now(UTC)
    config, info = await _with_session(lambda session: get_status(session, now=now))
    typer.echo(f"Status:  {info.status}")
    typer.echo(f"Time:    {info.time_remaining}")
    typer.echo(f"Clock:   {countdown_to_end(config, now)}")
    if config is not None:
        _echo_config(config)


@election_app.command("configure")
def configure(
    start: Annotated[str, typer.Option("--start", help="Window start (ISO 8601, UTC if no offset)")],
    end: Annotated[str, typer.Option("--end", help="Window end (ISO 8601, UTC if no offset)")],
    active: Annotated[bool, typer.Option("--active/--inactive", help="Activation toggle")] = True,
    allow_late_voting: Annotated[bool, typer.Option("--allow-late-voting", help="Stored flag")] = False,
) -> None:
    """Set the voting window."""
    start_time = _parse_datetime(start)
    end_time = _parse_datetime(end)
    asyncio.run(_configure_impl(start_time, end_time, active, allow_late_voting))


async def _configure_impl(start_time: datetime, end_time: datetime, active: bool, allow_late_voting: bool) -> None:
    from ballot_api.lib.election_status import InvalidElectionWindowError
    from ballot_api.services.election_config_service import update_config

    try:
        config = await _with_session(
            lambda session: update_config(
                session,
                start_time,
                end_time,
                is_active=active,
                allow_late_voting=allow_late_voting,
            )
        )
    except InvalidElectionWindowError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo("Election configured")
    _echo_config(config)


@election_app.command("start")
def start(
    hours: Annotated[int | None, typer.Option("--hours", min=1, help="Window length in hours")] = None,
) -> None:
    """Open voting now."""
    asyncio.run(_start_impl(hours))


async def _start_impl(hours: int | None) -> None:
    from ballot_api.core.config import get_settings
    from ballot_api.services.election_config_service import start_now

    duration = hours or get_settings().election_default_duration_hours
    config = await _with_session(lambda session: start_now(session, duration))
    typer.echo(f"Election started for {duration}h")
    _echo_config(config)


@election_app.command("extend")
def extend(
    minutes: Annotated[int | None, typer.Option("--minutes", min=1, help="Minutes to add to the end time")] = None,
) -> None:
    """Push the end time back."""
    asyncio.run(_extend_impl(minutes))


async def _extend_impl(minutes: int | None) -> None:
    from ballot_api.core.config import get_settings
    from ballot_api.services.election_config_service import ElectionNotConfiguredError
    from ballot_api.services.election_config_service import extend as extend_election

    added = minutes or get_settings().election_extend_minutes
    try:
        config = await _with_session(lambda session: extend_election(session, added))
    except ElectionNotConfiguredError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"Election extended by {added}m")
    _echo_config(config)


@election_app.command("stop")
def stop() -> None:
    """Stop voting immediately."""
    asyncio.run(_stop_impl())


async def _stop_impl() -> None:
    from ballot_api.services.election_config_service import ElectionNotConfiguredError
    from ballot_api.services.election_config_service import stop as stop_election

    try:
        config = await _with_session(stop_election)
    except ElectionNotConfiguredError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo("Election stopped")
    _echo_config(config)


@election_app.command("results")
def results() -> None:
    """Print the tabulated results with per-position totals and turnout."""
    asyncio.run(_results_impl())


async def _results_impl() -> None:
    from ballot_api.services.results_service import get_results

    payload = await _with_session(get_results)
    summaries = {summary.position_id: summary for summary in payload.positions}

    typer.echo(f"{'Position':<25} {'Candidate':<25} {'Votes':>6} {'%':>6}")
    typer.echo("-" * 65)
    current_position: str | None = None
    for row in payload.candidates:
        if current_position is not None and row.position_id != current_position:
            _echo_summary(summaries.get(current_position))
        current_position = row.position_id
        typer.echo(f"{row.position_title:<25} {row.name:<25} {row.vote_count:>6} {row.percentage:>6.1f}")
    if current_position is not None:
        _echo_summary(summaries.get(current_position))

    turnout = payload.turnout
    typer.echo(
        f"\nTurnout: {turnout.unique_voters}/{turnout.total_voters} voters "
        f"({turnout.turnout_rate:.1f}%), {turnout.votes_cast} vote(s) cast"
    )


def _echo_summary(summary: "PositionSummaryResponse | None") -> None:
    if summary is None:
        return
    typer.echo(f"{'':<25} {'valid / abstained':<25} {summary.valid_votes:>6} {summary.abstentions:>6}")
