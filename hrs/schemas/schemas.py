"""Pydantic schemas for API request/response serialization."""

from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime


# ---- Session ----
class SessionUser(BaseModel):
    """Identity stub resolved from cookies. Not authoritative."""
    id: int
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


# ---- User ----
class UserSummary(BaseModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str

    class Config:
        from_attributes = True

class RoleSummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class UserOut(UserSummary):
    role_id: int
    role: Optional[RoleSummary] = None
    permissions: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=6)
    role_id: int
    permissions: Optional[List[str]] = None

class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=6)
    role_id: Optional[int] = None
    permissions: Optional[List[str]] = None


# ---- Role ----
class RoleOut(BaseModel):
    id: Optional[int] = None
    name: str = ""
    description: Optional[str] = None
    permissions: List[str] = []
    created_by_user_id: Optional[int] = None
    created_by_user: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class RoleDetailOut(RoleOut):
    users: List[UserSummary] = []

class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    permissions: List[str] = []

class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    permissions: Optional[List[str]] = None

class RoleCapabilities(BaseModel):
    can_create_roles: bool
    can_update_roles: bool
    can_delete_roles: bool


# ---- Generic ----
class DataResponse(BaseModel):
    success: bool = True
    data: Optional[Any] = None
    message: str

class TableResponse(BaseModel):
    success: bool = True
    recordsTotal: int
    recordsFiltered: int
    data: List[Any] = []
    message: str
