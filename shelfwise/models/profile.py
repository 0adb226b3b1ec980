"""Profile model (display data written by the identity provider's signup flow)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from shelfwise.models.base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    """Public profile keyed by the identity provider's user id."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, full_name={self.full_name})>"
