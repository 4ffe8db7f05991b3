"""Service layer for user lookup and login."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.passwords import hash_password, verify_password
from models.enums import Role
from models.user import User
from services.exceptions import ConflictError, InvalidCredentialsError

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    """Get a user by ID."""
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user by email (case-insensitive)."""
    result = await db.execute(
        select(User).where(func.lower(User.email) == email.strip().lower()),
    )
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession, search: str | None = None) -> list[User]:
    """List users by name, optionally filtered by a case-insensitive name substring."""
    query = select(User).order_by(User.name, User.id)
    if search and search.strip():
        query = query.where(User.name.icontains(search.strip(), autoescape=True))
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: Role = Role.USER,
    contact: str | None = None,
) -> User:
    """
    Create a user with a hashed password.

    Raises:
        ConflictError: If another account already uses the email.
    """
    normalized_email = email.strip().lower()
    if await get_user_by_email(db, normalized_email) is not None:
        raise ConflictError(f"A user with email '{normalized_email}' already exists")
    user = User(
        name=name,
        email=normalized_email,
        contact=contact,
        password_hash=await run_in_threadpool(hash_password, password),
        role=role,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Check login credentials.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password does not match.
            Both cases produce the same error.
    """
    user = await get_user_by_email(db, email)
    # scrypt is CPU-bound
    if user is None or not await run_in_threadpool(
        verify_password, password, user.password_hash,
    ):
        logger.info("login_failed")
        raise InvalidCredentialsError()
    return user
