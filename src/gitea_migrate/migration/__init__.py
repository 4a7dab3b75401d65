"""Reconciliation engine: pagination, existence indices, strategies."""

from .strategy import (
    MigrationStrategy,
    MigrationResult,
    MigrationContext,
    MigrationStatus,
    ReconciliationDecision,
    UserPresenceCache,
    UserMigrationStrategy,
    OrganizationMigrationStrategy,
    RepositoryMigrationStrategy,
    MilestoneMigrationStrategy,
    LabelMigrationStrategy,
    IssueMigrationStrategy,
    map_state,
)
from .orchestrator import MigrationOrchestrator, MigrationPlan, MigrationSummary
from .engine import MigrationEngine

__all__ = [
    'MigrationStrategy',
    'MigrationResult',
    'MigrationContext',
    'MigrationStatus',
    'ReconciliationDecision',
    'UserPresenceCache',
    'UserMigrationStrategy',
    'OrganizationMigrationStrategy',
    'RepositoryMigrationStrategy',
    'MilestoneMigrationStrategy',
    'LabelMigrationStrategy',
    'IssueMigrationStrategy',
    'map_state',
    'MigrationOrchestrator',
    'MigrationPlan',
    'MigrationSummary',
    'MigrationEngine',
]
