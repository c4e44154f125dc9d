"""Authorization service for roles, permissions and their assignments.

Users reach permissions only through roles. Grants and revocations are
idempotent: granting an existing pair and revoking a missing one are both
silent no-ops. Permission checks resolve against the database on every call.
"""

from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.core.logging import get_logger
from warden.domain.entities import Page
from warden.domain.errors import AlreadyExistsError, InternalError, NotFoundError
from warden.infrastructure.persistence.models import (
    PermissionModel,
    RoleModel,
    RolePermissionModel,
    UserModel,
    UserRoleModel,
)
from warden.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRoleRepository,
)

logger = get_logger(__name__)


def _storage_error(operation: str, e: SQLAlchemyError) -> InternalError:
    logger.error("Authorization storage failure", operation=operation, error=str(e))
    return InternalError(f"{operation} failed: {e}")


class AuthorizationService:
    """Service for role-based access control."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the authorization service.

        Args:
            session_factory: Factory producing one session per operation.
        """
        self.session_factory = session_factory

    # Roles

    async def create_role(self, name: str, description: str | None = None) -> RoleModel:
        """Create a role.

        Raises:
            AlreadyExistsError: If a role with this name exists.
        """
        try:
            async with self.session_factory() as session:
                role_repo = RoleRepository(session)
                if await role_repo.get_by_name(name) is not None:
                    raise AlreadyExistsError(f"Role {name} already exists")
                role = await role_repo.create(RoleModel(name=name, description=description))
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("create_role", e) from e

        logger.info("Role created", role_id=role.id, name=name)
        return role

    async def get_role(self, role_id: int) -> RoleModel:
        """Get a role by ID.

        Raises:
            NotFoundError: If the role does not exist.
        """
        try:
            async with self.session_factory() as session:
                role = await RoleRepository(session).get_by_id(role_id)
        except SQLAlchemyError as e:
            raise _storage_error("get_role", e) from e
        if role is None:
            raise NotFoundError(f"Role {role_id} not found")
        return role

    async def update_role(
        self, role_id: int, name: str, description: str | None = None
    ) -> RoleModel:
        """Rename a role and replace its description.

        Raises:
            NotFoundError: If the role does not exist.
            AlreadyExistsError: If another role already uses ``name``.
        """
        try:
            async with self.session_factory() as session:
                role_repo = RoleRepository(session)
                role = await role_repo.get_by_id(role_id)
                if role is None:
                    raise NotFoundError(f"Role {role_id} not found")
                existing = await role_repo.get_by_name(name)
                if existing is not None and existing.id != role_id:
                    raise AlreadyExistsError(f"Role {name} already exists")
                role = await role_repo.update(role, name, description)
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("update_role", e) from e

        logger.info("Role updated", role_id=role_id, name=name)
        return role

    async def delete_role(self, role_id: int) -> None:
        """Delete a role, its memberships and its permission grants.

        Raises:
            NotFoundError: If the role does not exist.
        """
        try:
            async with self.session_factory() as session:
                role_repo = RoleRepository(session)
                role = await role_repo.get_by_id(role_id)
                if role is None:
                    raise NotFoundError(f"Role {role_id} not found")
                await role_repo.delete(role)
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("delete_role", e) from e

        logger.info("Role deleted", role_id=role_id)

    async def list_roles(self, page: int = 1, limit: int = 50) -> Page[RoleModel]:
        """List roles ordered by ID.

        Raises:
            ValueError: If ``page`` or ``limit`` is less than 1.
        """
        try:
            async with self.session_factory() as session:
                return await RoleRepository(session).paginate(page=page, limit=limit)
        except SQLAlchemyError as e:
            raise _storage_error("list_roles", e) from e

    # Permissions

    async def create_permission(
        self, name: str, action: str, resource: str | None = None
    ) -> PermissionModel:
        """Create a permission.

        Args:
            name: Unique permission name.
            action: Action the permission allows.
            resource: Optional resource the action applies to.

        Raises:
            AlreadyExistsError: If the name is taken, or if ``resource`` is
                given and the (resource, action) pair is taken.
        """
        try:
            async with self.session_factory() as session:
                permission_repo = PermissionRepository(session)
                if await permission_repo.get_by_name(name) is not None:
                    raise AlreadyExistsError(f"Permission {name} already exists")
                if resource is not None and (
                    await permission_repo.get_by_resource_and_action(resource, action)
                    is not None
                ):
                    raise AlreadyExistsError(
                        f"Permission for {action} on {resource} already exists"
                    )
                permission = await permission_repo.create(
                    PermissionModel(name=name, resource=resource, action=action)
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("create_permission", e) from e

        logger.info(
            "Permission created",
            permission_id=permission.id,
            name=name,
            resource=resource,
            action=action,
        )
        return permission

    async def get_permission(self, permission_id: int) -> PermissionModel:
        """Get a permission by ID.

        Raises:
            NotFoundError: If the permission does not exist.
        """
        try:
            async with self.session_factory() as session:
                permission = await PermissionRepository(session).get_by_id(permission_id)
        except SQLAlchemyError as e:
            raise _storage_error("get_permission", e) from e
        if permission is None:
            raise NotFoundError(f"Permission {permission_id} not found")
        return permission

    async def delete_permission(self, permission_id: int) -> None:
        """Delete a permission and every grant of it.

        Raises:
            NotFoundError: If the permission does not exist.
        """
        try:
            async with self.session_factory() as session:
                permission_repo = PermissionRepository(session)
                permission = await permission_repo.get_by_id(permission_id)
                if permission is None:
                    raise NotFoundError(f"Permission {permission_id} not found")
                await permission_repo.delete(permission)
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("delete_permission", e) from e

        logger.info("Permission deleted", permission_id=permission_id)

    async def list_permissions(
        self, page: int = 1, limit: int = 50
    ) -> Page[PermissionModel]:
        """List permissions ordered by name.

        Raises:
            ValueError: If ``page`` or ``limit`` is less than 1.
        """
        try:
            async with self.session_factory() as session:
                return await PermissionRepository(session).paginate(page=page, limit=limit)
        except SQLAlchemyError as e:
            raise _storage_error("list_permissions", e) from e

    async def permissions_for_resource(self, resource: str) -> list[PermissionModel]:
        """List the permissions scoped to ``resource``, ordered by name."""
        try:
            async with self.session_factory() as session:
                return await PermissionRepository(session).list_by_resource(resource)
        except SQLAlchemyError as e:
            raise _storage_error("permissions_for_resource", e) from e

    # Role <-> permission

    async def grant_permissions_to_role(
        self, role_id: int, permission_ids: Iterable[int]
    ) -> list[RolePermissionModel]:
        """Grant permissions to a role.

        Pairs that already exist are skipped.

        Returns:
            Only the grants created by this call.

        Raises:
            NotFoundError: If the role does not exist.
        """
        try:
            async with self.session_factory() as session:
                if await RoleRepository(session).get_by_id(role_id) is None:
                    raise NotFoundError(f"Role {role_id} not found")

                role_permission_repo = RolePermissionRepository(session)
                created: list[RolePermissionModel] = []
                for permission_id in permission_ids:
                    if await role_permission_repo.get(role_id, permission_id) is not None:
                        continue
                    created.append(await role_permission_repo.create(role_id, permission_id))
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("grant_permissions_to_role", e) from e

        logger.info(
            "Permissions granted to role",
            role_id=role_id,
            granted=[grant.permission_id for grant in created],
        )
        return created

    async def revoke_permissions_from_role(
        self, role_id: int, permission_ids: Iterable[int]
    ) -> None:
        """Revoke permissions from a role. Missing pairs are ignored.

        Raises:
            NotFoundError: If the role does not exist.
        """
        try:
            async with self.session_factory() as session:
                if await RoleRepository(session).get_by_id(role_id) is None:
                    raise NotFoundError(f"Role {role_id} not found")

                role_permission_repo = RolePermissionRepository(session)
                for permission_id in permission_ids:
                    await role_permission_repo.remove(role_id, permission_id)
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("revoke_permissions_from_role", e) from e

        logger.info("Permissions revoked from role", role_id=role_id)

    async def role_permissions(self, role_id: int) -> list[PermissionModel]:
        """List the permissions granted to a role, ordered by name."""
        try:
            async with self.session_factory() as session:
                return await RolePermissionRepository(session).list_permissions_for_role(
                    role_id
                )
        except SQLAlchemyError as e:
            raise _storage_error("role_permissions", e) from e

    async def permission_roles(self, permission_id: int) -> list[RoleModel]:
        """List the roles holding a permission, ordered by name."""
        try:
            async with self.session_factory() as session:
                return await RolePermissionRepository(session).list_roles_for_permission(
                    permission_id
                )
        except SQLAlchemyError as e:
            raise _storage_error("permission_roles", e) from e

    # User <-> role

    async def grant_roles_to_user(
        self, user_id: int, role_ids: Iterable[int]
    ) -> list[UserRoleModel]:
        """Assign roles to a user.

        Pairs that already exist are skipped. The user ID is not checked
        against the users table.

        Returns:
            Only the memberships created by this call.
        """
        try:
            async with self.session_factory() as session:
                user_role_repo = UserRoleRepository(session)
                created: list[UserRoleModel] = []
                for role_id in role_ids:
                    if await user_role_repo.get(user_id, role_id) is not None:
                        continue
                    created.append(await user_role_repo.create(user_id, role_id))
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("grant_roles_to_user", e) from e

        logger.info(
            "Roles granted to user",
            user_id=user_id,
            granted=[membership.role_id for membership in created],
        )
        return created

    async def revoke_roles_from_user(self, user_id: int, role_ids: Iterable[int]) -> None:
        """Remove roles from a user. Missing pairs are ignored."""
        try:
            async with self.session_factory() as session:
                user_role_repo = UserRoleRepository(session)
                for role_id in role_ids:
                    await user_role_repo.remove(user_id, role_id)
                await session.commit()
        except SQLAlchemyError as e:
            raise _storage_error("revoke_roles_from_user", e) from e

        logger.info("Roles revoked from user", user_id=user_id)

    async def user_roles(self, user_id: int) -> list[RoleModel]:
        """List the roles of a user, ordered by name."""
        try:
            async with self.session_factory() as session:
                return await UserRoleRepository(session).list_roles_for_user(user_id)
        except SQLAlchemyError as e:
            raise _storage_error("user_roles", e) from e

    async def role_users(self, role_id: int) -> list[UserModel]:
        """List the members of a role, ordered by last then first name."""
        try:
            async with self.session_factory() as session:
                return await UserRoleRepository(session).list_users_for_role(role_id)
        except SQLAlchemyError as e:
            raise _storage_error("role_users", e) from e

    # Checks

    async def user_permissions(self, user_id: int) -> list[PermissionModel]:
        """List every permission a user holds through any role.

        Each permission appears once, ordered by name.
        """
        try:
            async with self.session_factory() as session:
                return await RolePermissionRepository(session).list_permissions_for_user(
                    user_id
                )
        except SQLAlchemyError as e:
            raise _storage_error("user_permissions", e) from e

    async def user_has_permission(self, user_id: int, permission_name: str) -> bool:
        """Check whether a user holds the permission named ``permission_name``."""
        permissions = await self.user_permissions(user_id)
        return any(permission.name == permission_name for permission in permissions)

    async def user_has_resource_permission(
        self, user_id: int, resource: str, action: str
    ) -> bool:
        """Check whether a user may perform ``action`` on ``resource``."""
        permissions = await self.user_permissions(user_id)
        return any(
            permission.resource == resource and permission.action == action
            for permission in permissions
        )
