from __future__ import annotations

import strawberry

from ...database.connection import get_async_session
from ...dbmodels import Users
from ...logging import get_logger
from ...users import repository
from ..types.user import CreateUserPayload, DeleteUserPayload, UpdateUserPayload, User

logger = get_logger(__name__)


def to_user_type(user: Users) -> User:
    """Convert a SQLAlchemy Users row to the GraphQL User type."""
    return User(
        id=strawberry.ID(str(user.id)),
        name=user.name,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


# Query resolvers
async def resolve_users(info: strawberry.Info) -> list[User]:
    async with get_async_session() as session:
        users = await repository.list_users(session)
        return [to_user_type(user) for user in users]


async def resolve_user_by_id(info: strawberry.Info, id: str) -> User:
    """
    Resolve a user by its ID.

    An unknown ID raises UserNotFoundError, which is reported in the
    response's top-level errors.
    """
    async with get_async_session() as session:
        try:
            user = await repository.find_user(session, id)
        except repository.UserNotFoundError:
            logger.info("User not found", user_id=id)
            raise

        return to_user_type(user)


# Mutation resolvers
async def create_user(info: strawberry.Info, name: str, email: str) -> CreateUserPayload:
    async with get_async_session() as session:
        user, errors = await repository.create_user(session, name=name, email=email)

        if errors:
            logger.info("User creation rejected", errors=errors)
            return CreateUserPayload(user=None, errors=errors)

        logger.info("User created", user_id=user.id)
        return CreateUserPayload(user=to_user_type(user), errors=[])


async def update_user(
    info: strawberry.Info, id: str, name: str | None, email: str | None
) -> UpdateUserPayload:
    """
    Update a user by merging the supplied fields over its stored values.

    On validation failure the payload still carries the user, holding the
    rejected values, next to that user's error messages.
    """
    async with get_async_session() as session:
        user = await repository.find_user(session, id)

        if name is None:
            name = user.name
        if email is None:
            email = user.email

        errors = await repository.update_user(session, user, name=name, email=email)

        if errors:
            logger.info("User update rejected", user_id=user.id, errors=errors)
        else:
            logger.info("User updated", user_id=user.id)

        return UpdateUserPayload(user=to_user_type(user), errors=errors)


async def delete_user(info: strawberry.Info, id: str) -> DeleteUserPayload:
    async with get_async_session() as session:
        user = await repository.find_user(session, id)
        deleted = to_user_type(user)

        errors = await repository.destroy_user(session, user)

        if errors:
            logger.info("User deletion rejected", user_id=deleted.id, errors=errors)
            return DeleteUserPayload(user=None, errors=errors)

        logger.info("User deleted", user_id=deleted.id)
        return DeleteUserPayload(user=deleted, errors=[])
