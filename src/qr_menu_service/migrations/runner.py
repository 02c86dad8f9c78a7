"""Applies pending migrations in version order and records them."""

import logging
from datetime import UTC, datetime

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource

from qr_menu_service.exceptions import MigrationError
from qr_menu_service.migrations.base import Migration
from qr_menu_service.migrations.demo_request_enums import DemoRequestEnumRemap
from qr_menu_service.models.demo_request_models import AppliedMigration
from qr_menu_service.repositories.demo_request_repository import (
    DemoRequestRepository,
    MigrationLedgerRepository,
)

logger = logging.getLogger(__name__)

LEDGER = "ledger"


class MigrationRunner:
    """Runs each registered migration once, recording it in the ledger."""

    def __init__(self, ledger_repository: MigrationLedgerRepository, migrations: list[Migration]) -> None:
        """Initialize the runner.

        Args:
            ledger_repository: Ledger of applied migrations
            migrations: Every known migration

        Raises:
            ValueError: If two migrations share a version
        """
        versions = [m.version for m in migrations]
        if len(versions) != len(set(versions)):
            raise ValueError(f"Duplicate migration versions: {versions}")

        self.ledger_repository = ledger_repository
        self.migrations = sorted(migrations, key=lambda m: m.version)

    def applied(self) -> list[AppliedMigration]:
        """Ledger entries of applied migrations.

        Raises:
            MigrationError: If the ledger could not be read; nothing counts as pending then
        """
        entries = self.ledger_repository.list_applied()
        if entries is None:
            raise MigrationError(LEDGER, "could not read the migration ledger")
        return entries

    def pending(self) -> list[Migration]:
        """Registered migrations not yet in the ledger, in version order."""
        done = {entry.version for entry in self.applied()}
        return [m for m in self.migrations if m.version not in done]

    def apply_pending(self) -> list[AppliedMigration]:
        """Apply every pending migration, stopping at the first failure.

        Returns:
            Ledger entries written by this call

        Raises:
            MigrationError: From the failing migration; earlier ones stay recorded
        """
        recorded: list[AppliedMigration] = []

        for migration in self.pending():
            logger.info(f"Applying migration {migration.version}: {migration.description}")
            changed = migration.apply()

            entry = AppliedMigration(
                version=migration.version,
                description=migration.description,
                applied_at=datetime.now(UTC),
                records_changed=changed,
            )
            if self.ledger_repository.record_applied(entry):
                recorded.append(entry)
            else:
                logger.warning(f"Migration {migration.version} was recorded by another runner")

        if not recorded:
            logger.info("No pending migrations")

        return recorded


def build_migration_runner(
    dynamodb_resource: DynamoDBServiceResource,
    demo_requests_table: str,
    migrations_table: str,
) -> MigrationRunner:
    """Create a runner with every known migration registered."""
    ledger = MigrationLedgerRepository(dynamodb_resource=dynamodb_resource, table_name=migrations_table)
    demo_requests = DemoRequestRepository(
        dynamodb_resource=dynamodb_resource, table_name=demo_requests_table
    )

    return MigrationRunner(
        ledger_repository=ledger,
        migrations=[DemoRequestEnumRemap(demo_requests, ledger)],
    )
