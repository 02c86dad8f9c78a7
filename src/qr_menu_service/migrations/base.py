"""Base class for versioned data migrations."""

from abc import ABC, abstractmethod


class Migration(ABC):
    """A data fix-up that the runner applies at most once.

    Subclasses set ``version`` (sortable, e.g. "0001") and ``description``
    and implement apply(). apply() must be safe to run again on data it has
    already migrated, since a crash between applying and recording the
    ledger entry re-runs it.
    """

    version: str
    description: str

    @abstractmethod
    def apply(self) -> int:
        """Apply the migration.

        Returns:
            Number of records changed

        Raises:
            MigrationError: If the migration failed; data must be restored first
        """
