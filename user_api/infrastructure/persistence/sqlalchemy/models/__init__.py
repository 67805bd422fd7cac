"""
SQLAlchemy models package.

Importing this package registers every model on ``Base.metadata``.
"""

from user_api.infrastructure.persistence.sqlalchemy.models.user import UserModel

__all__ = ["UserModel"]
