"""Advising repository integration tests against the per-test SQLite database."""

import pytest

from course_advising.application.dtos.advising import AdvisingSubmission
from course_advising.domain.enums import AdvisingStatus
from course_advising.domain.exceptions import ResourceNotFoundException
from course_advising.infrastructure.persistence import database as db
from course_advising.infrastructure.persistence.repositories import AdvisingRepository
from course_advising.shared.utils.datetime import utc_now


async def test_create_entry_for_unknown_user_raises_not_found(database) -> None:
    db._ensure_engine()
    async with db.AsyncSessionLocal() as session:
        repo = AdvisingRepository(session)
        with pytest.raises(ResourceNotFoundException) as exc_info:
            await repo.create_entry(999, AdvisingSubmission(current_term="Fall 2025"))
    assert exc_info.value.details["resource_type"] == "user"


async def test_review_with_unknown_admin_raises_not_found(database, make_user) -> None:
    student = await make_user("student@example.com")
    db._ensure_engine()
    async with db.AsyncSessionLocal() as session:
        repo = AdvisingRepository(session)
        entry_id = await repo.create_entry(student.id, AdvisingSubmission(current_term=None))
        await repo.commit()
        with pytest.raises(ResourceNotFoundException) as exc_info:
            await repo.review_if_pending(
                entry_id, AdvisingStatus.APPROVED, "ok", 999, utc_now()
            )
        assert exc_info.value.details == {"resource_type": "reviewer", "resource_id": "999"}
        await session.rollback()
        assert await repo.get_status(entry_id) is AdvisingStatus.PENDING


async def test_review_if_pending_wins_once(database, make_user) -> None:
    admin = await make_user("admin@example.com", is_admin=True)
    student = await make_user("student@example.com")
    db._ensure_engine()
    async with db.AsyncSessionLocal() as session:
        repo = AdvisingRepository(session)
        entry_id = await repo.create_entry(student.id, AdvisingSubmission(current_term="Fall 2025"))
        assert await repo.review_if_pending(
            entry_id, AdvisingStatus.APPROVED, "  keep spacing ", admin.id, utc_now()
        )
        assert not await repo.review_if_pending(
            entry_id, AdvisingStatus.REJECTED, "late", admin.id, utc_now()
        )
        await repo.commit()
        entry = await repo.get_result(entry_id)
    assert entry.status is AdvisingStatus.APPROVED
    assert entry.admin_message == "  keep spacing "
    assert entry.admin_id == admin.id
