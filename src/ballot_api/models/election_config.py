"""Singleton election configuration record."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from ballot_api.models.base import Base

ELECTION_CONFIG_ID = 1


class ElectionConfig(Base):
    """The voting window and activation toggle (always row ``id=1``).

    ``allow_late_voting`` is stored and reported but does not affect status.
    """

    __tablename__ = "election_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=ELECTION_CONFIG_ID)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    allow_late_voting: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_election_config_window"),
        CheckConstraint(f"id = {ELECTION_CONFIG_ID}", name="ck_election_config_singleton"),
    )
