"""User repository with token and password helpers. Interface methods return application DTOs."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from course_advising.application.dtos.user import UserResult
from course_advising.domain.exceptions import EmailAlreadyRegisteredException
from course_advising.infrastructure.persistence.models.user import User
from course_advising.infrastructure.persistence.repositories.base import BaseRepository
from course_advising.infrastructure.security.password import (
    hash_password_async,
    verify_password_async,
)
from course_advising.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password or tokens)."""
    return UserResult(
        id=u.id,
        first_name=u.first_name,
        last_name=u.last_name,
        email=u.email,
        is_verified=u.is_verified,
        is_admin=u.is_admin,
        created_at=ensure_utc(u.created_at),
    )


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """User repository. Authenticate, create_user, token lookups, password updates."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def _on_after_create(self, obj: User) -> None:
        logger.info("User created: id=%s", obj.id)

    async def _on_before_delete(self, obj: User) -> None:
        logger.info("Deleting user: id=%s", obj.id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_by_verification_token(self, token: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.verification_token == token)
        )
        return result.scalar_one_or_none()

    async def get_by_reset_token(self, token: str) -> User | None:
        result = await self.db.execute(select(User).where(User.reset_token == token))
        return result.scalar_one_or_none()

    async def get_result(self, user_id: int) -> UserResult | None:
        user = await self.get_by_id(user_id)
        return _user_to_result(user) if user else None

    async def list_results(self) -> list[UserResult]:
        result = await self.db.execute(select(User).order_by(User.id))
        return [_user_to_result(u) for u in result.scalars().all()]

    async def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when email and password match, else None.

        Unknown emails still pay for one bcrypt check (timing-attack mitigation).
        """
        user = await self.get_by_email(email)
        if not user:
            await verify_password_async(password, None)
            return None
        if not await verify_password_async(password, user.hashed_password):
            return None
        return user

    async def check_password(self, user: User, password: str) -> bool:
        return await verify_password_async(password, user.hashed_password)

    async def create_user(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        verification_token: str,
        *,
        is_admin: bool = False,
        is_verified: bool = False,
    ) -> User:
        """Create user; raise EmailAlreadyRegisteredException on unique constraint violation."""
        email = normalize_email(email)
        if await self.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredException(email)
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            hashed_password=await hash_password_async(password),
            verification_token=verification_token,
            is_admin=is_admin,
            is_verified=is_verified,
        )
        try:
            return await self.create(user)
        except IntegrityError:
            raise EmailAlreadyRegisteredException(email)

    async def update(self, obj: User) -> User:
        """Update user; raise EmailAlreadyRegisteredException on duplicate email."""
        try:
            return await super().update(obj)
        except IntegrityError:
            raise EmailAlreadyRegisteredException(obj.email)

    async def update_profile(
        self, user: User, first_name: str, last_name: str, email: str
    ) -> UserResult:
        email = normalize_email(email)
        if email != user.email:
            other = await self.get_by_email(email)
            if other is not None and other.id != user.id:
                raise EmailAlreadyRegisteredException(email)
        user.first_name = first_name
        user.last_name = last_name
        user.email = email
        return _user_to_result(await self.update(user))

    async def mark_verified(self, user: User) -> UserResult:
        user.is_verified = True
        user.verification_token = None
        return _user_to_result(await self.update(user))

    async def set_reset_token(self, user: User, token: str) -> None:
        user.reset_token = token
        await self.update(user)

    async def set_password(self, user: User, new_password: str) -> None:
        """Store a new password hash and clear any outstanding reset token."""
        user.hashed_password = await hash_password_async(new_password)
        user.reset_token = None
        await self.update(user)

    @staticmethod
    def to_result(user: User) -> UserResult:
        return _user_to_result(user)
