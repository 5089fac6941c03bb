"""Pydantic schemas for API request/response serialization."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from adminconsole.models.user import UserRole

USERNAME = dict(min_length=3, max_length=50)
FULL_NAME = dict(min_length=3, max_length=100)
MOBILE = dict(pattern=r"^[0-9]{10}$")
PASSWORD = dict(min_length=6)
PASSWORD_MAX_BYTES = 72  # bcrypt input limit


# ---- Auth ----
class LoginRequest(BaseModel):
    # Presence is checked by the auth service so both fields fail together.
    email: Optional[str] = None
    password: Optional[str] = None

class LoginUser(BaseModel):
    user_id: int
    username: str
    full_name: str
    role: UserRole

    class Config:
        from_attributes = True

class LoginResponse(BaseModel):
    message: str = "Logged in successfully"
    accessToken: str
    user: LoginUser


# ---- Project ----
class ProjectAssignmentIn(BaseModel):
    project_id: int = Field(..., gt=0)
    support_type: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True

class ProjectAssignmentOut(BaseModel):
    project_name: str
    support_type: str

class ProjectOut(BaseModel):
    project_id: int
    project_name: str

    class Config:
        from_attributes = True

class ProjectListResponse(BaseModel):
    projects: List[ProjectOut]


# ---- User ----
class UserCreateRequest(BaseModel):
    username: str = Field(..., **USERNAME)
    full_name: str = Field(..., **FULL_NAME)
    email: EmailStr
    mobile: str = Field(..., **MOBILE)
    role: UserRole
    password: str = Field(..., **PASSWORD)
    projects: List[ProjectAssignmentIn] = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        return value

class UserUpdateRequest(BaseModel):
    username: Optional[str] = Field(None, **USERNAME)
    full_name: Optional[str] = Field(None, **FULL_NAME)
    email: Optional[EmailStr] = None
    mobile: Optional[str] = Field(None, **MOBILE)
    role: Optional[UserRole] = None

    class Config:
        str_strip_whitespace = True

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value

class UserCreatedResponse(BaseModel):
    message: str = "User created successfully"
    userId: int
    role: UserRole

class UserSummary(BaseModel):
    user_id: int
    username: str
    full_name: str
    email: str
    role: UserRole

    class Config:
        from_attributes = True

class UserOut(UserSummary):
    mobile: str

class UserDetail(UserOut):
    projects: List[ProjectAssignmentOut] = []

class UserListResponse(BaseModel):
    message: str = "Users fetched successfully"
    users: List[UserSummary]

class UserDetailResponse(BaseModel):
    message: str = "User fetched successfully"
    user: UserDetail

class UserUpdatedResponse(BaseModel):
    message: str = "User updated successfully"
    user: UserOut

class UserDeletedResponse(BaseModel):
    message: str = "User deleted successfully"
    deletedUserId: int


# ---- Audit ----
class AuditLogOut(BaseModel):
    id: int
    actor_id: Optional[int] = None
    actor_email: Optional[str] = None
    action: str
    resource_type: str
    resource_id: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AuditLogListResponse(BaseModel):
    logs: List[AuditLogOut]
    total: int
    page: int
    page_size: int


# ---- Generic ----
class ErrorResponse(BaseModel):
    errors: List[str]
