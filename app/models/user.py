from datetime import datetime, timezone
from pydantic import EmailStr
from sqlmodel import SQLModel, Field
from uuid6 import uuid7

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def new_id() -> str:
    return str(uuid7())

class UserBase(SQLModel):
    email: str

class User(UserBase):
    """Stored user record. Only the in-memory store holds these."""
    id: str = Field(default_factory=new_id)
    password: str # bcrypt hash, never serialized to clients
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

class UserRead(UserBase):
    id: str
    created_at: datetime
    updated_at: datetime

class UserResponse(UserBase):
    """Public view returned alongside a token."""
    id: str
    created_at: datetime

# Auth payloads

class SignupRequest(SQLModel):
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=6, max_length=72)

class LoginRequest(SQLModel):
    email: EmailStr
    password: str = Field(min_length=1)

class AuthResponse(SQLModel):
    token: str
    user: UserResponse
