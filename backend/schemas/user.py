from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from schemas.common import ORMBase, NonEmptyStr

# Shared properties for user models
class UserBase(ORMBase):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for user registration requests
class UserCreate(UserBase):
    password: NonEmptyStr = Field(max_length=72)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

# Output schema for user profile details
class UserResponse(UserBase):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None

# Schema for JWT authentication token response
class Token(ORMBase):
    access_token: str
    token_type: str = "bearer"
