"""Permissions API router — the fixed hierarchy, for role forms."""

from fastapi import APIRouter, Depends

from hrs.core.permissions import HIERARCHY, Permission
from hrs.core.security import RequirePermission
from hrs.models.user import User
from hrs.schemas.schemas import DataResponse

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("", response_model=DataResponse)
async def get_permissions(user: User = Depends(RequirePermission(Permission.READ_ROLES))):
    return DataResponse(
        data={
            "hierarchy": HIERARCHY.as_dict(),
            "permissions": sorted(HIERARCHY.all_permissions()),
        },
        message="Permissions retrieved successfully.",
    )
