# backend/schemas/common.py
from typing import Annotated, Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Non-blank string, surrounding whitespace stripped
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# Base configuration: ORM compatibility, camelCase on the wire,
# snake_case still accepted on input
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


# Uniform response wrapper for every API endpoint
class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    count: Optional[int] = None
