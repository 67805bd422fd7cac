import enum


class Gender(str, enum.Enum):
    """Gender of a user. Values are matched case-sensitively."""

    MALE = "MALE"
    FEMALE = "FEMALE"
