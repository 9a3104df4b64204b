"""
Shared base model for backend payloads.
"""

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts the backend's camelCase keys as well as snake_case names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"


class CounterModel(CamelModel):
    """Server-side counters; a null counter reads as zero."""

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_zero(cls, value):
        return 0 if value is None else value
