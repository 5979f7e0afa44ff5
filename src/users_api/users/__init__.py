"""User record store."""

from .repository import UserNotFoundError

__all__ = ["UserNotFoundError"]
