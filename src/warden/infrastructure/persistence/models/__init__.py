"""SQLAlchemy models for the Warden tables.

All models inherit from the Base class defined in database.py. Tables are
created by the migration steps, never by ``create_all`` at runtime.
"""

from warden.infrastructure.persistence.models.permission import PermissionModel
from warden.infrastructure.persistence.models.role import RoleModel
from warden.infrastructure.persistence.models.role_permission import RolePermissionModel
from warden.infrastructure.persistence.models.user import UserModel
from warden.infrastructure.persistence.models.user_role import UserRoleModel

__all__ = [
    "PermissionModel",
    "RoleModel",
    "RolePermissionModel",
    "UserModel",
    "UserRoleModel",
]
