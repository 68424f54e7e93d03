"""
Rating: one self-rating event (1–10) logged by a user.

Append-only. Ratings are never edited; a later rating on the same day
supersedes an earlier one only in the analytics, not in storage.
"""
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from ten_insights.db.base import Base


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        CheckConstraint("value BETWEEN 1 AND 10", name="ck_rating_value_range"),
        Index("ix_ratings_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(String(280), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
