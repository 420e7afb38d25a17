"""User model."""

from typing import FrozenSet

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hrs.core.permissions import HIERARCHY, PermissionHierarchy, effective_permissions
from hrs.db.base import Base, utcnow


class User(Base):
    """Staff account with a role and optional permission overrides."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    password = Column(String(255), nullable=False)  # "<hexSalt>:<hexHash>"
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    permissions = Column(JSON, nullable=True)  # overrides the role when non-empty
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    role = relationship(
        "Role",
        foreign_keys=[role_id],
        back_populates="users",
        lazy="joined",
    )
    created_roles = relationship(
        "Role",
        foreign_keys="[Role.created_by_user_id]",
        back_populates="created_by_user",
    )

    @property
    def granted_permissions(self) -> FrozenSet[str]:
        role_permissions = self.role.permissions if self.role is not None else None
        return effective_permissions(self.permissions, role_permissions)

    def can(self, permission: str, hierarchy: PermissionHierarchy = HIERARCHY) -> bool:
        return hierarchy.can(self.granted_permissions, permission)
