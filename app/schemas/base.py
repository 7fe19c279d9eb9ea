"""
Shared base schema: snake_case attributes, camelCase JSON.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for API schemas.

    Fields are declared in snake_case and exposed as camelCase
    (num_employees <-> numEmployees). Either spelling is accepted on input.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Largest value an INTEGER column holds
MAX_INT = 2147483647


def reject_null(value):
    """For partial updates: a NOT NULL column may be left out, but not set to null."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value
