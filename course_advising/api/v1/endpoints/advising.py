"""Advising API: submit, edit while pending, admin review, history and admin listing."""

from fastapi import APIRouter, Depends

from course_advising.api.v1.dependencies import (
    get_advising_service,
    get_advising_service_for_write,
)
from course_advising.application.dtos.advising import AdvisingSubmission
from course_advising.application.services import AdvisingService
from course_advising.domain.entities.advising_entry import CourseRequest
from course_advising.schemas.advising import (
    AdminAdvisingEntryResponse,
    AdvisingEntryResponse,
    AdvisingReviewRequest,
    AdvisingReviewResponse,
    AdvisingSubmitRequest,
    AdvisingSubmitResponse,
    AdvisingUpdateRequest,
    CourseItem,
)

router = APIRouter()


def _submission(
    body: AdvisingSubmitRequest | AdvisingUpdateRequest,
) -> AdvisingSubmission:
    return AdvisingSubmission(
        current_term=body.current_term,
        last_term=body.last_term,
        last_gpa=body.last_gpa,
        courses=tuple(_course(c) for c in body.courses),
    )


def _course(item: CourseItem) -> CourseRequest:
    return CourseRequest(course_level=item.course_level, course_name=item.course_name)


@router.post("", response_model=AdvisingSubmitResponse, status_code=201)
async def submit_advising(
    body: AdvisingSubmitRequest,
    advising: AdvisingService = Depends(get_advising_service_for_write),
):
    """Submit a new advising entry (starts Pending)."""
    entry_id = await advising.submit(body.user_id, _submission(body))
    return AdvisingSubmitResponse(advising_id=entry_id)


@router.get("/admin/all", response_model=list[AdminAdvisingEntryResponse])
async def list_all_entries(
    advising: AdvisingService = Depends(get_advising_service),
):
    """Every entry with the submitter's name and email, newest first."""
    entries = await advising.all_for_admin()
    return [AdminAdvisingEntryResponse.model_validate(e) for e in entries]


@router.post("/{entry_id}/review", response_model=AdvisingReviewResponse)
async def review_entry(
    entry_id: int,
    body: AdvisingReviewRequest,
    advising: AdvisingService = Depends(get_advising_service_for_write),
):
    """Approve or reject a pending entry with feedback; the student is emailed."""
    entry = await advising.review(
        entry_id, body.status, body.admin_message, body.admin_id
    )
    return AdvisingReviewResponse(
        message=f"Advising entry {entry.status.value.lower()}",
        entry=AdvisingEntryResponse.model_validate(entry),
    )


@router.get("/history/{user_id}", response_model=list[AdvisingEntryResponse])
async def get_history(
    user_id: int,
    advising: AdvisingService = Depends(get_advising_service),
):
    """Entries submitted by one user, newest first."""
    entries = await advising.history_for_user(user_id)
    return [AdvisingEntryResponse.model_validate(e) for e in entries]


@router.get("/{entry_id}", response_model=AdvisingEntryResponse)
async def get_entry(
    entry_id: int,
    advising: AdvisingService = Depends(get_advising_service),
):
    """One entry with its course list."""
    return AdvisingEntryResponse.model_validate(await advising.get_one(entry_id))


@router.put("/{entry_id}", response_model=AdvisingEntryResponse)
async def edit_entry(
    entry_id: int,
    body: AdvisingUpdateRequest,
    advising: AdvisingService = Depends(get_advising_service_for_write),
):
    """Edit fields and replace the course list; only while Pending."""
    await advising.edit(entry_id, _submission(body))
    return AdvisingEntryResponse.model_validate(await advising.get_one(entry_id))
