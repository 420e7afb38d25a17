"""Dashboard page loaders — session guard and role page capabilities."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hrs.core.exceptions import AuthorizationError, ResourceNotFoundError
from hrs.core.permissions import Permission
from hrs.core.security import RequirePermission, require_session
from hrs.db.session import get_db
from hrs.models.user import User
from hrs.schemas.schemas import RoleCapabilities, RoleDetailOut, RoleOut, SessionUser
from hrs.services.role_service import role_service

# Every dashboard page sends anonymous visitors back to the login page.
router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(require_session)],
)


def role_capabilities(user: User) -> RoleCapabilities:
    return RoleCapabilities(
        can_create_roles=user.can(Permission.CREATE_ROLES),
        can_update_roles=user.can(Permission.UPDATE_ROLES),
        can_delete_roles=user.can(Permission.DELETE_ROLES),
    )


@router.get("")
async def dashboard(stub: SessionUser = Depends(require_session)):
    """Layout data; anonymous visitors are redirected to the login page."""
    return {"user": stub}


@router.get("/roles")
async def roles_page(user: User = Depends(RequirePermission(Permission.READ_ROLES))):
    return {"capabilities": role_capabilities(user)}


@router.get("/roles/{role_id}")
async def role_page(
    role_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(RequirePermission(Permission.READ_ROLES)),
):
    """Role detail page: ``new`` for the create form, ``?edit`` for the edit form."""
    capabilities = role_capabilities(user)
    is_new = role_id.lower() == "new"
    is_edit = not is_new and "edit" in request.query_params

    if is_new:
        if not capabilities.can_create_roles:
            raise AuthorizationError("Forbidden")
        return {"capabilities": capabilities, "role": RoleOut()}
    if is_edit and not capabilities.can_update_roles:
        raise AuthorizationError("Forbidden")

    if not role_id.isdigit():
        raise ResourceNotFoundError("Role not found")

    role = await role_service.get(db, int(role_id), with_users=True)
    return {"capabilities": capabilities, "role": RoleDetailOut.model_validate(role)}
