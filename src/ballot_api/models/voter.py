"""Voter model and server-side voter sessions."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ballot_api.models.base import Base, UUIDMixin


class Voter(Base):
    """A registered voter identified by an assigned code.

    Once ``has_voted`` is set the voter can no longer open a voting session.
    """

    __tablename__ = "voters"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    avatar: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    has_voted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    voted_positions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)


class VoterSession(Base, UUIDMixin):
    """An open voting session; deleted at logout or once every position is voted."""

    __tablename__ = "voter_sessions"

    voter_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("voters.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_voter_sessions_voter_id", "voter_id"),)
