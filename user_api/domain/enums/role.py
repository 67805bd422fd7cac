import enum


class Role(str, enum.Enum):
    """Roles a user may hold. Values are matched case-sensitively."""

    ADMIN = "ADMIN"
    USER = "USER"
    WORKER = "WORKER"
