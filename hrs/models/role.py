"""Role model for RBAC."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from hrs.core.permissions import HIERARCHY, Permission, PermissionHierarchy
from hrs.db.base import Base, utcnow


class Role(Base):
    """Named bundle of permission labels assignable to users."""
    __tablename__ = "roles"

    SUPER_ADMINISTRATOR = {
        "id": 1,
        "name": "Super Administrator",
        "permissions": [Permission.DO_EVERYTHING],
    }

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    permissions = Column(JSON, nullable=False, default=list)  # list of permission labels
    created_by_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    created_by_user = relationship(
        "User",
        foreign_keys=[created_by_user_id],
        back_populates="created_roles",
    )
    users = relationship(
        "User",
        foreign_keys="[User.role_id]",
        back_populates="role",
    )

    @classmethod
    def super_administrator(cls) -> "Role":
        """A new Super Administrator row with its own copy of the permission list."""
        return cls(
            id=cls.SUPER_ADMINISTRATOR["id"],
            name=cls.SUPER_ADMINISTRATOR["name"],
            permissions=list(cls.SUPER_ADMINISTRATOR["permissions"]),
        )

    def can(self, permission: str, hierarchy: PermissionHierarchy = HIERARCHY) -> bool:
        return hierarchy.can(self.permissions or [], permission)
