"""
Friendship graph + externally computed friendship scores.

Both tables are written by other services (social graph, interaction
scoring job). This service only reads them.

friendship_scores.level values:
  "new friend" | "acquaintance" | "friend" | "close friend" | "best friend"
"""
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from ten_insights.db.base import Base


class Friendship(Base):
    __tablename__ = "friendships"
    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friendship_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    friend_id: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class FriendshipScoreRecord(Base):
    __tablename__ = "friendship_scores"
    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_friendship_score_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    friend_id: Mapped[str] = mapped_column(String(64), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level: Mapped[str | None] = mapped_column(
        String(32), nullable=True,
        comment="Tier label; derived from score when NULL",
    )
    total_interactions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    friendship_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
