"""User ORM model for authentication and profile data."""

from sqlalchemy import Boolean, String, text
from sqlalchemy.orm import Mapped, mapped_column

from course_advising.infrastructure.persistence.database import Base
from course_advising.infrastructure.persistence.models.mixins import (
    IntegerIdMixin,
    TimestampMixin,
)


class User(IntegerIdMixin, TimestampMixin, Base):
    """User model. Table: app_user. Email is globally unique.

    verification_token and reset_token are one-time values, cleared on use.
    """

    __tablename__ = "app_user"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    is_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    verification_token: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True
    )
    reset_token: Mapped[str | None] = mapped_column(
        String(128), nullable=True, index=True
    )
