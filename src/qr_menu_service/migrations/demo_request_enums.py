"""Migration 0001: remap demo request status and potential values.

The demo request workflow dropped CONTACTED and CANCELLED in favour of
FOLLOW_UP and NEGATIVE, and NEGATIVE stopped being a sales potential.
Every record is backed up before it is touched; if any write fails, the
records already rewritten are restored from that backup.
"""

import logging

from qr_menu_service.exceptions import MigrationError
from qr_menu_service.migrations.base import Migration
from qr_menu_service.models.demo_request_models import (
    DemoRequest,
    DemoRequestPotential,
    DemoRequestStatus,
)
from qr_menu_service.repositories.demo_request_repository import (
    DemoRequestRepository,
    MigrationLedgerRepository,
)

logger = logging.getLogger(__name__)

STATUS_REMAP = {
    DemoRequestStatus.CONTACTED: DemoRequestStatus.FOLLOW_UP,
    DemoRequestStatus.CANCELLED: DemoRequestStatus.NEGATIVE,
}

CLEARED_POTENTIALS = {DemoRequestPotential.NEGATIVE}


def remap_demo_request(record: DemoRequest) -> DemoRequest:
    """Return ``record`` with legacy values replaced; unchanged records are returned as is."""
    status = STATUS_REMAP.get(record.status, record.status)
    potential = None if record.potential in CLEARED_POTENTIALS else record.potential

    if status == record.status and potential == record.potential:
        return record

    return record.model_copy(update={"status": status, "potential": potential})


class DemoRequestEnumRemap(Migration):
    """Rewrite legacy demo request status and potential values."""

    version = "0001"
    description = "Remap demo request status CONTACTED/CANCELLED and clear NEGATIVE potential"

    def __init__(
        self,
        demo_request_repository: DemoRequestRepository,
        ledger_repository: MigrationLedgerRepository,
    ) -> None:
        self.demo_request_repository = demo_request_repository
        self.ledger_repository = ledger_repository

    def apply(self) -> int:
        records = self.demo_request_repository.list_all()
        if records is None:
            raise MigrationError(self.version, "could not read demo requests")

        logger.info(f"Backing up {len(records)} demo requests")
        backup = {record.id: record for record in records}
        if not self.ledger_repository.save_backup(
            self.version, [record.to_dynamodb_item() for record in records]
        ):
            raise MigrationError(self.version, "could not store backup")

        rewritten: list[str] = []
        for record in records:
            migrated = remap_demo_request(record)
            if migrated is record:
                continue

            if not self.demo_request_repository.save(migrated):
                self._restore(backup, rewritten)
                raise MigrationError(self.version, f"could not rewrite demo request {record.id}")

            rewritten.append(record.id)
            logger.info(
                f"Remapped {record.full_name}: status {record.status.value} -> "
                f"{migrated.status.value}"
            )

        logger.info(f"Migration {self.version} rewrote {len(rewritten)} demo requests")
        return len(rewritten)

    def _restore(self, backup: dict[str, DemoRequest], rewritten: list[str]) -> None:
        logger.error(f"Restoring {len(rewritten)} demo requests from backup")
        failed = [rid for rid in rewritten if not self.demo_request_repository.save(backup[rid])]
        if failed:
            logger.error(f"Could not restore demo requests {failed}; backup is in the ledger")
