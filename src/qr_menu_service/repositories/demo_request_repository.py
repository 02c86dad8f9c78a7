"""DynamoDB repositories for demo requests and the migration ledger.

Following the write-side convention, expected failures return None/False
and are logged rather than raised. The migration runner decides what a
failed write means.
"""

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from qr_menu_service.models.demo_request_models import AppliedMigration, DemoRequest

logger = logging.getLogger(__name__)


class DemoRequestRepository:
    """Repository for demo request records keyed by id."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def list_all(self) -> list[DemoRequest] | None:
        """Scan every demo request.

        Returns:
            list: All demo requests, or None if the scan failed
        """
        items: list[dict[str, Any]] = []

        try:
            response = self.table.scan()
            items.extend(response.get("Items", []))

            while "LastEvaluatedKey" in response:
                response = self.table.scan(ExclusiveStartKey=response["LastEvaluatedKey"])
                items.extend(response.get("Items", []))

        except ClientError as e:
            logger.error(f"Failed to scan demo requests: {e}")  # pragma: no cover
            return None

        return [DemoRequest.from_dynamodb_item(item) for item in items]

    def save(self, demo_request: DemoRequest) -> bool:
        """Save or replace a demo request.

        Args:
            demo_request: DemoRequest to save

        Returns:
            bool: True if save succeeded, False otherwise
        """
        try:
            self.table.put_item(Item=demo_request.to_dynamodb_item())
            return True

        except ClientError as e:
            logger.error(f"Failed to save demo request {demo_request.id}: {e}")  # pragma: no cover
            return False


class MigrationLedgerRepository:
    """Repository recording which migrations have been applied.

    Manages ledger records in DynamoDB with version as partition key.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def list_applied(self) -> list[AppliedMigration] | None:
        """List applied migrations ordered by version.

        Backup items share the table and can push ledger entries onto later
        pages, so every page is read.

        Returns:
            list: Applied migrations, or None if the ledger could not be read
        """
        items: list[dict[str, Any]] = []

        try:
            response = self.table.scan()
            items.extend(response.get("Items", []))

            while "LastEvaluatedKey" in response:
                response = self.table.scan(ExclusiveStartKey=response["LastEvaluatedKey"])
                items.extend(response.get("Items", []))

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list applied migrations: {e}")
            return None

        applied = [
            AppliedMigration.from_dynamodb_item(item)
            for item in items
            if not item["version"].startswith("backup#")
        ]
        return sorted(applied, key=lambda m: m.version)

    def record_applied(self, migration: AppliedMigration) -> bool:
        """Record a migration as applied, once.

        The put is conditional on the version being absent, so two runners
        racing on the same migration cannot both record it.

        Args:
            migration: Ledger entry to write

        Returns:
            bool: True if recorded, False if already present or on failure
        """
        try:
            self.table.put_item(
                Item=migration.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(version)",
            )
            return True

        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                logger.warning(f"Migration {migration.version} already recorded")
                return False
            logger.error(f"Failed to record migration {migration.version}: {e}")  # pragma: no cover
            return False

    def save_backup(self, version: str, records: list[dict[str, Any]]) -> bool:
        """Store a pre-migration snapshot alongside the ledger.

        An existing snapshot is never overwritten: it holds the data from
        before the first attempt, which a re-run would have already changed.

        Args:
            version: Migration version the snapshot belongs to
            records: DynamoDB items as they were before the migration

        Returns:
            bool: True if stored or already present, False otherwise
        """
        try:
            self.table.put_item(
                Item={
                    "version": f"backup#{version}",
                    "description": f"Backup taken before migration {version}",
                    "records": records,
                },
                ConditionExpression="attribute_not_exists(version)",
            )
            return True

        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                logger.warning(f"Backup for migration {version} already exists, keeping it")
                return True
            logger.error(f"Failed to save backup for migration {version}: {e}")  # pragma: no cover
            return False
