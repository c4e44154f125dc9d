"""Hand-rolled schema migrations."""

from warden.infrastructure.persistence.migrations.runner import (
    MigrationRunner,
    MigrationStatus,
    migrations_table,
)
from warden.infrastructure.persistence.migrations.steps import MIGRATIONS, MigrationStep

__all__ = [
    "MIGRATIONS",
    "MigrationRunner",
    "MigrationStatus",
    "MigrationStep",
    "migrations_table",
]
