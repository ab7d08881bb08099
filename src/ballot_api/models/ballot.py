"""Ballot ORM models: positions, candidates, and cast votes."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from ballot_api.models.base import Base, TimestampMixin, UUIDMixin


class Position(Base, UUIDMixin, TimestampMixin):
    """An electable office shown on the ballot, ordered by ``order``."""

    __tablename__ = "positions"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    __table_args__ = (Index("idx_positions_order", "order"),)


class Candidate(Base, UUIDMixin, TimestampMixin):
    """A nominee for exactly one position."""

    __tablename__ = "candidates"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    position_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("positions.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (Index("idx_candidates_position_id", "position_id"),)


class Vote(Base, UUIDMixin):
    """An immutable ballot entry.

    ``candidate_id`` holds the chosen candidate's id as a string, or ``PASS``
    for an abstention.  Position and candidate ids are not foreign keys so
    the vote log survives ballot edits.
    """

    __tablename__ = "votes"

    voter_id: Mapped[str] = mapped_column(String(32), nullable=False)
    position_id: Mapped[str] = mapped_column(String(36), nullable=False)
    candidate_id: Mapped[str] = mapped_column(String(36), nullable=False)
    candidate_name: Mapped[str] = mapped_column(String(200), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("voter_id", "position_id", name="uq_votes_voter_position"),
        Index("idx_votes_position_id", "position_id"),
        Index("idx_votes_candidate_id", "candidate_id"),
    )
