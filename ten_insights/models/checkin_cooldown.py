"""
CheckInCooldown: the only state this service owns.

One row per user. `last_triggered_at` is written when a check-in session
starts and is never cleared by skipping or completing it.
"""
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from ten_insights.db.base import Base


class CheckInCooldown(Base):
    __tablename__ = "checkin_cooldowns"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_triggered_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
