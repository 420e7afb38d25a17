"""Models package — import all models so metadata.create_all can discover them."""

from hrs.models.role import Role
from hrs.models.user import User
from hrs.models.setting import Setting

__all__ = ["Role", "User", "Setting"]
