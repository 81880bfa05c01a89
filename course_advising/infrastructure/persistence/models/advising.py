"""Advising entry and course request ORM models."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from course_advising.domain.enums import AdvisingStatus
from course_advising.infrastructure.persistence.database import Base
from course_advising.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    IntegerIdMixin,
)


class AdvisingEntry(IntegerIdMixin, CreatedAtMixin, Base):
    """Advising entry. Table: advising_entry.

    Review columns (admin_message, admin_id, reviewed_at) are all NULL while
    status is Pending and all set otherwise.
    """

    __tablename__ = "advising_entry"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    last_term: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_gpa: Mapped[float | None] = mapped_column(
        Numeric(4, 2, asdecimal=False), nullable=True
    )
    current_term: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AdvisingStatus.PENDING.value,
        server_default=text(f"'{AdvisingStatus.PENDING.value}'"),
    )
    admin_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    courses: Mapped[list["AdvisingCourse"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="AdvisingCourse.id",
        lazy="raise",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('Pending', 'Approved', 'Rejected')",
            name="ck_advising_entry_status",
        ),
        CheckConstraint(
            "(status = 'Pending' AND admin_message IS NULL AND admin_id IS NULL "
            "AND reviewed_at IS NULL) OR "
            "(status <> 'Pending' AND admin_message IS NOT NULL "
            "AND reviewed_at IS NOT NULL)",
            name="ck_advising_entry_review_fields",
        ),
        Index("ix_advising_entry_user_created", "user_id", "created_at"),
    )


class AdvisingCourse(Base):
    """One requested course of an advising entry. Table: advising_course."""

    __tablename__ = "advising_course"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    advising_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("advising_entry.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_level: Mapped[str] = mapped_column(String(50), nullable=False)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)

    entry: Mapped[AdvisingEntry] = relationship(back_populates="courses")
