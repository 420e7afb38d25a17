"""Users API router — listing and CRUD."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.permissions import Permission
from hrs.core.security import RequirePermission
from hrs.db.session import get_db
from hrs.models.user import User
from hrs.schemas.schemas import DataResponse, TableResponse, UserCreate, UserOut, UserUpdate
from hrs.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=TableResponse)
async def list_users(
    start: int = Query(0, ge=0),
    length: Optional[int] = Query(None, ge=0),
    search: Optional[str] = Query(None, alias="search[value]"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.READ_USERS)),
):
    """List users for a data table."""
    result = await user_service.list_users(db, start, length, search)
    return TableResponse(
        recordsTotal=result["total"],
        recordsFiltered=result["filtered"],
        data=[UserOut.model_validate(u) for u in result["users"]],
        message="Users retrieved successfully",
    )


@router.get("/{user_id}", response_model=DataResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.READ_USERS)),
):
    """Get a single user."""
    found = await user_service.get(db, user_id)
    return DataResponse(data=UserOut.model_validate(found), message="User retrieved successfully.")


@router.post("", response_model=DataResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.CREATE_USERS)),
):
    """Create a user."""
    created = await user_service.create(db, **body.model_dump())
    return DataResponse(data=UserOut.model_validate(created), message="User created successfully.")


@router.put("/{user_id}", response_model=DataResponse)
async def update_user(
    user_id: int,
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.UPDATE_USERS)),
):
    """Update a user."""
    updated = await user_service.update(db, user_id, **body.model_dump(exclude_unset=True))
    return DataResponse(data=UserOut.model_validate(updated), message="User updated successfully.")


@router.delete("/{user_id}", response_model=DataResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.DELETE_USERS)),
):
    """Delete a user."""
    await user_service.delete(db, user_id, acting_user_id=user.id)
    return DataResponse(message="User deleted successfully.")
