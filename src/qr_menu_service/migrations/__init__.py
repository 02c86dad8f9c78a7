"""Versioned, apply-once data migrations."""

from qr_menu_service.migrations.base import Migration
from qr_menu_service.migrations.runner import MigrationRunner, build_migration_runner

__all__ = ["Migration", "MigrationRunner", "build_migration_runner"]
