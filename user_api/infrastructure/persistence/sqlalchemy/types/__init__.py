from user_api.infrastructure.persistence.sqlalchemy.types.simple_array import SimpleArray

__all__ = ["SimpleArray"]
