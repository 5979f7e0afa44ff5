"""
User GraphQL type definitions
"""

from datetime import datetime

import strawberry


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: strawberry.ID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


@strawberry.type
class UserPayload:
    """Result of a user mutation: the affected user, or null, plus error messages."""

    user: User | None
    errors: list[str]


@strawberry.type
class CreateUserPayload(UserPayload):
    pass


@strawberry.type
class UpdateUserPayload(UserPayload):
    pass


@strawberry.type
class DeleteUserPayload(UserPayload):
    pass
