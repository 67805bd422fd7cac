"""Application services of the User resource."""

from user_api.application.services.user_service import UserService

__all__ = ["UserService"]
