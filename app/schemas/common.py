from pydantic import BaseModel, model_validator
from typing import ClassVar, Tuple


class PartialUpdate(BaseModel):
    """
    PATCH body base.

    Omitted fields stay unchanged. Fields listed in ``not_nullable`` back NOT
    NULL columns, so an explicit ``null`` for them is rejected with a 422
    instead of reaching the database.
    """

    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        if isinstance(data, dict):
            nulls = [name for name in cls.not_nullable if name in data and data[name] is None]
            if nulls:
                raise ValueError(f"{', '.join(nulls)} cannot be null")
        return data
