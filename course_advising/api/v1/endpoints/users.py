"""User API: thin routes delegating to AccountService."""

from fastapi import APIRouter, Depends

from course_advising.api.v1.dependencies import (
    get_account_service,
    get_account_service_for_write,
)
from course_advising.application.services import AccountService
from course_advising.schemas.auth import StatusResponse
from course_advising.schemas.user import UserResponse, UserUpdateRequest

router = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    accounts: AccountService = Depends(get_account_service),
):
    """List all users."""
    users = await accounts.list_users()
    return [UserResponse.model_validate(u) for u in users]


@router.get("/profile/{user_id}", response_model=UserResponse)
async def get_profile(
    user_id: int,
    accounts: AccountService = Depends(get_account_service),
):
    """Profile of one user (same shape as GET /users/{id})."""
    return UserResponse.model_validate(await accounts.get_user(user_id))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    accounts: AccountService = Depends(get_account_service),
):
    """Get user by id."""
    return UserResponse.model_validate(await accounts.get_user(user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    body: UserUpdateRequest,
    accounts: AccountService = Depends(get_account_service_for_write),
):
    """Update name and email."""
    user = await accounts.update_profile(
        user_id, body.first_name, body.last_name, body.email
    )
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=StatusResponse)
async def delete_user(
    user_id: int,
    accounts: AccountService = Depends(get_account_service_for_write),
):
    """Delete a user and, by cascade, their advising entries."""
    await accounts.delete_user(user_id)
    return StatusResponse(message="User deleted successfully")
