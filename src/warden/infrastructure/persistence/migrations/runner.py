"""Forward-only schema migration runner.

Applied steps are recorded by name in the ``migrations`` table. A step's
schema change and its bookkeeping row are written in one transaction, so a
crash between the two cannot leave a step applied but unrecorded.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    delete,
    func,
    insert,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from warden.core.logging import get_logger
from warden.domain.errors import MigrationError
from warden.infrastructure.persistence.migrations.steps import MIGRATIONS, MigrationStep

logger = get_logger(__name__)

# Kept out of Base.metadata: the tracking table is not part of the domain schema.
tracking_metadata = MetaData()

migrations_table = Table(
    "migrations",
    tracking_metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column(
        "applied_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    ),
)


@dataclass(frozen=True)
class MigrationStatus:
    """Whether a registered step has been applied."""

    name: str
    applied: bool
    applied_at: datetime | None = None


class MigrationRunner:
    """Applies, rolls back and reports registered migration steps."""

    def __init__(
        self,
        engine: AsyncEngine,
        steps: Sequence[MigrationStep] = MIGRATIONS,
    ) -> None:
        """Initialize the runner.

        Args:
            engine: Engine the migrations run against.
            steps: Ordered steps to manage. Names must be unique.
        """
        names = [step.name for step in steps]
        if len(names) != len(set(names)):
            raise ValueError("Migration step names must be unique")
        self.engine = engine
        self.steps = tuple(steps)
        self._steps_by_name = {step.name: step for step in self.steps}

    async def initialize(self) -> None:
        """Create the tracking table if it does not exist."""
        logger.info("Initializing migrations")
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(migrations_table.create, checkfirst=True)
        except SQLAlchemyError as e:
            logger.error("Failed to create migrations table", error=str(e))
            raise MigrationError(f"Failed to create migrations table: {e}") from e

    async def _applied(self, conn: AsyncConnection) -> dict[str, datetime]:
        result = await conn.execute(
            select(migrations_table.c.name, migrations_table.c.applied_at).order_by(
                migrations_table.c.id
            )
        )
        return {row.name: row.applied_at for row in result}

    async def apply_all(self) -> list[str]:
        """Apply every pending step in registration order.

        Stops at the first failing step; that step is left unrecorded and
        the steps before it stay applied.

        Returns:
            Names of the steps applied by this call.

        Raises:
            MigrationError: If a step fails.
        """
        logger.info("Running migrations")
        async with self.engine.connect() as conn:
            applied = await self._applied(conn)

        newly_applied: list[str] = []
        for step in self.steps:
            if step.name in applied:
                logger.debug("Migration already applied, skipping", migration=step.name)
                continue

            logger.info("Applying migration", migration=step.name)
            try:
                async with self.engine.begin() as conn:
                    await step.up(conn)
                    await conn.execute(
                        insert(migrations_table).values(
                            name=step.name,
                            applied_at=datetime.now(timezone.utc),
                        )
                    )
            except SQLAlchemyError as e:
                logger.error("Migration failed", migration=step.name, error=str(e))
                raise MigrationError(f"Migration {step.name} failed: {e}") from e

            newly_applied.append(step.name)
            logger.info("Migration applied", migration=step.name)

        logger.info("All migrations completed", applied_count=len(newly_applied))
        return newly_applied

    async def rollback_last(self) -> str | None:
        """Revert the most recently applied step.

        Returns:
            Name of the reverted step, or None when nothing is applied.

        Raises:
            MigrationError: If the recorded step is not registered or its
                ``down`` action fails.
        """
        logger.info("Rolling back last migration")
        try:
            async with self.engine.begin() as conn:
                row = (
                    await conn.execute(
                        select(migrations_table.c.name)
                        .order_by(migrations_table.c.id.desc())
                        .limit(1)
                    )
                ).first()
                if row is None:
                    logger.info("No migrations to roll back")
                    return None

                step = self._steps_by_name.get(row.name)
                if step is None:
                    raise MigrationError(
                        f"Applied migration {row.name} is not registered"
                    )

                await step.down(conn)
                await conn.execute(
                    delete(migrations_table).where(migrations_table.c.name == row.name)
                )
        except SQLAlchemyError as e:
            logger.error("Rollback failed", error=str(e))
            raise MigrationError(f"Rollback failed: {e}") from e

        logger.info("Migration rolled back", migration=row.name)
        return row.name

    async def status(self) -> list[MigrationStatus]:
        """Report, for every registered step, whether it has been applied."""
        async with self.engine.connect() as conn:
            applied = await self._applied(conn)
        return [
            MigrationStatus(
                name=step.name,
                applied=step.name in applied,
                applied_at=applied.get(step.name),
            )
            for step in self.steps
        ]

    async def run(self) -> list[str]:
        """Initialize the tracking table and apply pending steps."""
        await self.initialize()
        return await self.apply_all()
