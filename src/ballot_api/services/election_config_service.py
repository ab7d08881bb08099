"""Election configuration: the singleton voting window and its admin actions.

Every write goes through ``update_config`` so the window is validated
before it reaches the Store.  Concurrent admin writes are last-write-wins.
"""

from datetime import UTC, datetime, timedelta

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.change_feed import ChangeAction, Collection, change_feed
from ballot_api.lib.election_status import StatusInfo, as_utc, derive_status, validate_window
from ballot_api.models.election_config import ELECTION_CONFIG_ID, ElectionConfig


class ElectionNotConfiguredError(ValueError):
    """Raised when an action needs an election configuration and none exists."""


async def get_config(session: AsyncSession) -> ElectionConfig | None:
    """Return the election configuration, or None if never configured."""
    return await session.get(ElectionConfig, ELECTION_CONFIG_ID)


async def _require_config(session: AsyncSession) -> ElectionConfig:
    config = await get_config(session)
    if config is None:
        msg = "No election configuration found"
        raise ElectionNotConfiguredError(msg)
    return config


async def update_config(
    session: AsyncSession,
    start_time: datetime,
    end_time: datetime,
    *,
    is_active: bool = True,
    allow_late_voting: bool = False,
) -> ElectionConfig:
    """Create or replace the election configuration.

    Args:
        session: The database session.
        start_time: Start of the voting window.
        end_time: End of the voting window.
        is_active: Admin activation toggle.
        allow_late_voting: Stored as-is; not used for status.

    Returns:
        The stored ElectionConfig.

    Raises:
        InvalidElectionWindowError: If ``start_time >= end_time``.
    """
    validate_window(start_time, end_time)

    config = await get_config(session)
    action = ChangeAction.UPDATED
    if config is None:
        config = ElectionConfig(id=ELECTION_CONFIG_ID)
        session.add(config)
        action = ChangeAction.CREATED

    config.start_time = as_utc(start_time)
    config.end_time = as_utc(end_time)
    config.is_active = is_active
    config.allow_late_voting = allow_late_voting
    config.updated_at = datetime.now(UTC)

    await session.commit()
    await session.refresh(config)
    logger.info(
        f"Election config {action}: {config.start_time.isoformat()} -> {config.end_time.isoformat()} "
        f"(active={config.is_active})"
    )
    change_feed.publish(Collection.ELECTION_CONFIG, action, str(ELECTION_CONFIG_ID))
    return config


async def start_now(
    session: AsyncSession,
    duration_hours: int = 24,
    *,
    now: datetime | None = None,
) -> ElectionConfig:
    """Open voting immediately for ``duration_hours``."""
    now = now or datetime.now(UTC)
    return await update_config(session, now, now + timedelta(hours=duration_hours), is_active=True)


async def extend(session: AsyncSession, minutes: int = 10) -> ElectionConfig:
    """Move the end time ``minutes`` later, keeping every other setting.

    Raises:
        ElectionNotConfiguredError: If there is no configuration to extend.
    """
    config = await _require_config(session)
    return await update_config(
        session,
        config.start_time,
        as_utc(config.end_time) + timedelta(minutes=minutes),
        is_active=config.is_active,
        allow_late_voting=config.allow_late_voting,
    )


async def stop(session: AsyncSession, *, now: datetime | None = None) -> ElectionConfig:
    """Stop the election: deactivate it and end the window now.

    When stopped before the window opened, the end time is placed one second
    after the start so the stored window stays valid.

    Raises:
        ElectionNotConfiguredError: If there is no configuration to stop.
    """
    config = await _require_config(session)
    now = as_utc(now or datetime.now(UTC))
    start_time = as_utc(config.start_time)
    end_time = max(now, start_time + timedelta(seconds=1))
    logger.warning(f"Stopping election at {now.isoformat()}")
    return await update_config(
        session,
        start_time,
        end_time,
        is_active=False,
        allow_late_voting=config.allow_late_voting,
    )


async def get_status(
    session: AsyncSession,
    *,
    now: datetime | None = None,
    fine: bool = False,
) -> tuple[ElectionConfig | None, StatusInfo]:
    """Load the configuration and derive its status at ``now``."""
    config = await get_config(session)
    return config, derive_status(config, now or datetime.now(UTC), fine=fine)
