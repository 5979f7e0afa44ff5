"""Record store for Users: lookup, validation and persistence.

Write helpers return the validation messages of the record they were given;
an empty list means the write was committed.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Users
from ..logging import get_logger

logger = get_logger(__name__)

# Largest primary key a 64-bit signed INTEGER column can hold
MAX_ID = 2**63 - 1


class UserNotFoundError(Exception):
    """Raised when no User matches the requested id."""

    def __init__(self, user_id: int | str):
        self.user_id = user_id
        super().__init__(f"Couldn't find User with 'id'={user_id}")


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_user(user: Users) -> list[str]:
    """Return full validation messages for the record's current values."""
    errors = []
    if _is_blank(user.name):
        errors.append("Name can't be blank")
    if _is_blank(user.email):
        errors.append("Email can't be blank")
    return errors


def _parse_id(user_id: int | str) -> int | None:
    """Return the integer primary key, or None when no row could carry it."""
    text_id = str(user_id)
    if not (text_id.isascii() and text_id.isdigit()):
        return None
    pk = int(text_id)
    if pk > MAX_ID:
        return None
    return pk


async def find_user(session: AsyncSession, user_id: int | str) -> Users:
    pk = _parse_id(user_id)
    if pk is None:
        raise UserNotFoundError(user_id)

    user = await session.get(Users, pk)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def list_users(session: AsyncSession) -> list[Users]:
    result = await session.execute(select(Users).order_by(Users.id))
    return list(result.scalars().all())


async def create_user(session: AsyncSession, *, name: str, email: str) -> tuple[Users, list[str]]:
    user = Users(name=name, email=email)

    errors = validate_user(user)
    if errors:
        return user, errors

    session.add(user)
    await session.commit()
    await session.refresh(user)

    return user, []


async def update_user(
    session: AsyncSession, user: Users, *, name: str, email: str
) -> list[str]:
    user.name = name
    user.email = email

    errors = validate_user(user)
    if errors:
        # Keep the rejected values on the instance but never flush them
        session.expunge(user)
        return errors

    await session.commit()
    await session.refresh(user)

    return []


async def destroy_user(session: AsyncSession, user: Users) -> list[str]:
    user_id = user.id
    await session.delete(user)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.warning("User delete blocked by constraint", user_id=user_id, error=str(e.orig))
        return ["Cannot delete record because dependent records exist"]

    return []
