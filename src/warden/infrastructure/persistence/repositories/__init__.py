"""Persistence repositories for database operations."""

from warden.infrastructure.persistence.repositories.permission_repository import (
    PermissionRepository,
)
from warden.infrastructure.persistence.repositories.role_permission_repository import (
    RolePermissionRepository,
)
from warden.infrastructure.persistence.repositories.role_repository import (
    RoleRepository,
)
from warden.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)
from warden.infrastructure.persistence.repositories.user_role_repository import (
    UserRoleRepository,
)

__all__ = [
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
]
