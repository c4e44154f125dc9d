"""SQLAlchemy model for the permissions table.

A permission is a named action, optionally scoped to a resource
(e.g. resource ``article`` with action ``publish``).
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from warden.infrastructure.persistence.database import Base


class PermissionModel(Base):
    """SQLAlchemy model for the permissions table.

    The (resource, action) constraint only bites when resource is set: NULL
    resources never compare equal, on SQLite and PostgreSQL alike.

    Attributes:
        id: Auto-incrementing primary key.
        name: Unique permission name.
        resource: Optional resource the action applies to.
        action: Action name.
        created_at: Timestamp when the permission was created.
        updated_at: Timestamp when the permission was last updated.
    """

    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )
    resource: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Resource scope, NULL for global actions",
    )
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("resource", "action", name="uq_permissions_resource_action"),
        Index("ix_permissions_resource_action", "resource", "action"),
    )

    def __repr__(self) -> str:
        return (
            f"<Permission(id={self.id}, name={self.name}, "
            f"resource={self.resource}, action={self.action})>"
        )
