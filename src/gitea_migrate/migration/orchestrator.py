"""Migration orchestrator for sequencing the reconciliation phases."""

from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from .strategy import (
    MigrationContext,
    MigrationResult,
    MigrationStatus,
    OrganizationMigrationStrategy,
    ReconciliationDecision,
    RepositoryMigrationStrategy,
    RepositoryTarget,
    REPOSITORY_SCOPED_STRATEGIES,
    UserMigrationStrategy,
)

# Later phases depend on what earlier ones created: repositories live under
# organizations, issues reference milestones and labels by Gitea ID.
EXECUTION_ORDER = ('users', 'organizations', 'repositories')


class MigrationPlan(BaseModel):
    """Which phases to run."""

    migrate_users: bool = Field(default=True, description='Migrate users')
    migrate_organizations: bool = Field(
        default=True, description='Migrate organizations'
    )
    migrate_repositories: bool = Field(default=True, description='Migrate repositories')
    migrate_repository_metadata: bool = Field(
        default=True, description='Migrate milestones, labels and issues'
    )


class MigrationSummary(BaseModel):
    """Summary of migration results."""

    total_entities: int = Field(..., description='Total entities processed')
    created: int = Field(..., description='Entities created')
    updated: int = Field(..., description='Entities updated')
    skipped: int = Field(..., description='Entities left as they were')
    planned: int = Field(default=0, description='Changes a dry run would make')

    started_at: datetime = Field(..., description='Migration start time')
    completed_at: Optional[datetime] = Field(
        default=None, description='Migration completion time'
    )

    results_by_type: Dict[str, Dict[str, int]] = Field(
        default_factory=dict, description='Results grouped by entity type'
    )
    all_results: List[MigrationResult] = Field(
        default_factory=list, description='All migration results'
    )


class MigrationOrchestrator:
    """Runs the reconciliation phases strictly one after another.

    Users, organizations and repositories are migrated in that order. Right
    after a repository is reconciled, its milestones, labels and issues are
    migrated before the next repository is looked at.
    """

    def __init__(self, context: MigrationContext):
        """Initialize migration orchestrator.

        Args:
            context: Migration context with clients and settings
        """
        self.context = context
        self.logger = logger.bind(component='MigrationOrchestrator')
        # What the run is working on, named in the failure log
        self.current_scope: Optional[str] = None

        self.strategies = {
            'users': UserMigrationStrategy(context),
            'organizations': OrganizationMigrationStrategy(context),
            'repositories': RepositoryMigrationStrategy(context),
        }

    async def execute_migration(self, plan: MigrationPlan) -> MigrationSummary:
        """Execute migration according to the plan.

        Any error aborts the run immediately and is re-raised unchanged.
        Changes applied before the error are kept.

        Args:
            plan: Migration execution plan

        Returns:
            Migration summary with results
        """
        self.logger.info('Starting migration execution')
        self.current_scope = None
        started_at = datetime.now()
        all_results: List[MigrationResult] = []
        results_by_type: Dict[str, Dict[str, int]] = {}

        try:
            for phase in EXECUTION_ORDER:
                if not self._should_run_phase(phase, plan):
                    self.logger.info(f'Skipping {phase} migration (disabled in plan)')
                    continue

                self.logger.info(f'Starting {phase} migration')
                self.current_scope = phase

                if phase == 'repositories':
                    phase_results = await self._migrate_repositories(plan)
                else:
                    phase_results = await self.strategies[phase].migrate_all()

                all_results.extend(phase_results)
                self.logger.info(f'Completed {phase} migration')

        except Exception as e:
            self.logger.error(f'Migrating {self.current_scope} failed: {e}')
            raise

        for result in all_results:
            counts = results_by_type.setdefault(
                result.entity_type, self._empty_counts()
            )
            self._count(counts, result)

        totals = self._empty_counts()
        for result in all_results:
            self._count(totals, result)

        summary = MigrationSummary(
            total_entities=totals['total'],
            created=totals['created'],
            updated=totals['updated'],
            skipped=totals['skipped'],
            planned=totals['planned'],
            started_at=started_at,
            completed_at=datetime.now(),
            results_by_type=results_by_type,
            all_results=all_results,
        )

        self.logger.info(
            f'Migration completed: {summary.created} created, '
            f'{summary.updated} updated, {summary.skipped} skipped'
        )
        return summary

    async def _migrate_repositories(self, plan: MigrationPlan) -> List[MigrationResult]:
        """Reconcile every repository, each followed by its own metadata."""
        strategy = self.strategies['repositories']
        results = []

        async for project in strategy.source_pager():
            result = await strategy.migrate_entity(project)
            results.append(result)

            if not plan.migrate_repository_metadata:
                continue

            target = strategy.target_for(project)
            if result.status == MigrationStatus.PLANNED:
                # Nothing to reconcile against until the import really happens.
                self.logger.info(f'Skipping metadata of {target}, not imported yet')
                continue

            results.extend(await self.migrate_repository_metadata(target))

        return results

    async def migrate_repository_metadata(
        self, target: RepositoryTarget
    ) -> List[MigrationResult]:
        """Migrate milestones, then labels, then issues of one repository."""
        results = []
        outer_scope = self.current_scope
        for strategy_class in REPOSITORY_SCOPED_STRATEGIES:
            strategy = strategy_class(self.context, target)
            self.current_scope = f'{strategy.entity_type}s of {target}'
            self.logger.info(f'Migrating {self.current_scope}')
            results.extend(await strategy.migrate_all())
        self.current_scope = outer_scope
        return results

    def _should_run_phase(self, phase: str, plan: MigrationPlan) -> bool:
        flags = {
            'users': plan.migrate_users,
            'organizations': plan.migrate_organizations,
            'repositories': plan.migrate_repositories,
        }
        return flags.get(phase, False)

    @staticmethod
    def _empty_counts() -> Dict[str, int]:
        return {'total': 0, 'created': 0, 'updated': 0, 'skipped': 0, 'planned': 0}

    @staticmethod
    def _count(counts: Dict[str, int], result: MigrationResult) -> None:
        counts['total'] += 1
        if result.status == MigrationStatus.PLANNED:
            counts['planned'] += 1
        elif result.decision == ReconciliationDecision.CREATE:
            counts['created'] += 1
        elif result.decision == ReconciliationDecision.UPDATE:
            counts['updated'] += 1
        else:
            counts['skipped'] += 1

    async def dry_run_migration(self, plan: MigrationPlan) -> MigrationSummary:
        """Perform a dry run of the migration.

        Args:
            plan: Migration execution plan

        Returns:
            Migration summary (dry run results)
        """
        original_dry_run = self.context.dry_run
        self.context.dry_run = True

        try:
            self.logger.info('Starting migration dry run')
            return await self.execute_migration(plan)
        finally:
            self.context.dry_run = original_dry_run
