"""Advising API schemas.

Request bodies also accept the web client's field names: ``userId`` for
``user_id`` and ``level`` for ``course_level``.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from course_advising.domain.enums import AdvisingStatus


class CourseItem(BaseModel):
    """One requested course."""

    model_config = ConfigDict(from_attributes=True)

    course_level: str = Field(
        ...,
        min_length=1,
        max_length=50,
        validation_alias=AliasChoices("course_level", "level"),
    )
    course_name: str = Field(..., min_length=1, max_length=255)


class AdvisingSubmitRequest(BaseModel):
    """Request body for POST /advising. A missing user_id is reported as 400."""

    user_id: int | None = Field(
        default=None, validation_alias=AliasChoices("user_id", "userId")
    )
    last_term: str | None = Field(default=None, max_length=50)
    last_gpa: float | None = Field(default=None, ge=0, le=99.99)
    current_term: str | None = Field(default=None, max_length=50)
    courses: list[CourseItem] = Field(default_factory=list)


class AdvisingUpdateRequest(BaseModel):
    """Request body for PUT /advising/{id}. Courses replace the stored list."""

    last_term: str | None = Field(default=None, max_length=50)
    last_gpa: float | None = Field(default=None, ge=0, le=99.99)
    current_term: str | None = Field(default=None, max_length=50)
    courses: list[CourseItem] = Field(default_factory=list)


class AdvisingReviewRequest(BaseModel):
    """Request body for POST /advising/{id}/review.

    Fields are optional here so that absent values produce the workflow's
    own 400 errors in a fixed order.
    """

    status: str | None = None
    admin_message: str | None = None
    admin_id: int | None = None


class AdvisingEntryResponse(BaseModel):
    """Advising entry with its course list."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime | None = None
    last_term: str | None = None
    last_gpa: float | None = None
    current_term: str | None = None
    status: AdvisingStatus
    admin_message: str | None = None
    admin_id: int | None = None
    reviewed_at: datetime | None = None
    courses: list[CourseItem] = Field(default_factory=list)


class AdminAdvisingEntryResponse(AdvisingEntryResponse):
    """Advising entry as listed for administrators (includes the submitter)."""

    student_name: str | None = None
    student_email: str | None = None


class AdvisingSubmitResponse(BaseModel):
    status: str = "success"
    advising_id: int


class AdvisingReviewResponse(BaseModel):
    """Result of a review: the updated entry."""

    status: str = "success"
    message: str
    entry: AdvisingEntryResponse
