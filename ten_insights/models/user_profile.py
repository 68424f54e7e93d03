from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ten_insights.db.base import Base


class UserProfile(Base):
    """Display metadata for a user. Owned by the social-graph service; read-only here."""
    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
