"""Roles API router — data-table listing and CRUD."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.permissions import Permission
from hrs.core.security import RequirePermission
from hrs.db.session import get_db
from hrs.models.user import User
from hrs.schemas.schemas import (
    DataResponse, RoleCreate, RoleDetailOut, RoleOut, RoleUpdate, TableResponse,
)
from hrs.services.role_service import role_service

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("", response_model=TableResponse)
async def list_roles(
    start: int = Query(0, ge=0),
    length: Optional[int] = Query(None, ge=0),
    search: Optional[str] = Query(None, alias="search[value]"),
    filter_name: Optional[str] = Query(None, alias="filter[name]"),
    filter_description: Optional[str] = Query(None, alias="filter[description]"),
    order_name: str = Query("id", alias="order[0][name]"),
    order_dir: str = Query("asc", alias="order[0][dir]", pattern="(?i)^(asc|desc)$"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.READ_ROLES)),
):
    """List roles for a data table."""
    result = await role_service.list_roles(
        db, start, length, search, filter_name, filter_description, order_name, order_dir.lower(),
    )
    return TableResponse(
        recordsTotal=result["total"],
        recordsFiltered=result["filtered"],
        data=[RoleOut.model_validate(r) for r in result["roles"]],
        message="Roles retrieved successfully",
    )


@router.get("/{role_id}", response_model=DataResponse)
async def get_role(
    role_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.READ_ROLES)),
):
    """Get a single role with its creator and users."""
    role = await role_service.get(db, role_id, with_users=True)
    return DataResponse(
        data=RoleDetailOut.model_validate(role),
        message="Role retrieved successfully.",
    )


@router.post("", response_model=DataResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    body: RoleCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.CREATE_ROLES)),
):
    """Create a role owned by the current user."""
    role = await role_service.create(
        db, body.name, body.description, body.permissions, user.id,
    )
    return DataResponse(data=RoleOut.model_validate(role), message="Role created successfully.")


@router.put("/{role_id}", response_model=DataResponse)
async def update_role(
    role_id: int,
    body: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.UPDATE_ROLES)),
):
    """Update a role."""
    role = await role_service.update(db, role_id, **body.model_dump(exclude_unset=True))
    return DataResponse(data=RoleOut.model_validate(role), message="Role updated successfully.")


@router.delete("/{role_id}", response_model=DataResponse)
async def delete_role(
    role_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.DELETE_ROLES)),
):
    """Delete a role."""
    await role_service.delete(db, role_id)
    return DataResponse(message="Role deleted successfully.")
