
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, UUID4
from datetime import datetime


# Properties to receive via API on creation (POST /auth/register)
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)


# Properties to receive via API on admin creation (POST /auth/admin/register)
class AdminCreate(UserCreate):
    admin_secret: str


# Properties returned via API
class User(BaseModel):
    id: UUID4
    email: EmailStr
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
    user: User


class TokenPayload(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None
