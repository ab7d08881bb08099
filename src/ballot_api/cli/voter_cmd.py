"""Voter roll CLI commands: bulk code generation and listing."""

import asyncio
from typing import Annotated

import typer

voter_app = typer.Typer()


@voter_app.command("generate")
def generate(
    count: Annotated[int, typer.Option("--count", "-n", min=1, max=10000, help="Number of voters to register")],
    avatar_seed: Annotated[
        str,
        typer.Option("--avatar-seed", help="Avatar prefix; voter n gets '<seed><n>' (default: the voter code)"),
    ] = "",
) -> None:
    """Register COUNT voters and print their voter codes."""
    asyncio.run(_generate_impl(count, avatar_seed))


async def _generate_impl(count: int, avatar_seed: str) -> None:
    """Async implementation of the generate command."""
    from ballot_api.core.config import get_settings
    from ballot_api.core.database import dispose_engine, get_session_factory, init_engine
    from ballot_api.services.voter_service import register_voters

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            voters = await register_voters(
                session,
                count,
                avatar_seed=avatar_seed,
                id_length=settings.voter_id_length,
            )
            for voter in voters:
                typer.echo(voter.id)
            typer.echo(f"\nRegistered {len(voters)} voter(s)")
    finally:
        await dispose_engine()


@voter_app.command("list")
def list_voters(
    has_voted: Annotated[bool | None, typer.Option("--voted/--not-voted", help="Filter on voting status")] = None,
) -> None:
    """List registered voters."""
    asyncio.run(_list_impl(has_voted))


async def _list_impl(has_voted: bool | None) -> None:
    """Async implementation of the list command."""
    from ballot_api.core.config import get_settings
    from ballot_api.core.database import dispose_engine, get_session_factory, init_engine
    from ballot_api.services.voter_service import list_voters

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            voters, total = await list_voters(session, 1, 10000, has_voted=has_voted)
            typer.echo(f"{'Voter ID':<12} {'Voted':<6} {'Positions':<10} {'Registered':<20}")
            typer.echo("-" * 50)
            for voter in voters:
                registered = voter.created_at.strftime("%Y-%m-%d %H:%M")
                typer.echo(f"{voter.id:<12} {voter.has_voted!s:<6} {len(voter.voted_positions):<10} {registered:<20}")
            typer.echo(f"\nTotal: {total}")
    finally:
        await dispose_engine()
