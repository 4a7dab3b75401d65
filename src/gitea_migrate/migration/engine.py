"""Migration engine - main entry point for migration operations."""

from typing import Optional
from loguru import logger

from ..config.config import Config
from ..api.factory import ClientFactory
from .strategy import MigrationContext
from .orchestrator import MigrationOrchestrator, MigrationPlan, MigrationSummary


class MigrationEngine:
    """Main migration engine that coordinates the entire migration process."""

    def __init__(self, config: Config):
        """Initialize migration engine.

        Args:
            config: Migration configuration
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.source_client = ClientFactory.create_source_client(config.source)
        self.destination_client = ClientFactory.create_destination_client(
            config.destination
        )

        self.context = MigrationContext(
            source_client=self.source_client,
            destination_client=self.destination_client,
            source_page_size=config.source.page_size,
            destination_page_size=config.destination.page_size,
            source_token=config.source.token or config.source.oauth_token,
            admin_user=config.destination.admin_user,
            default_password=config.migration.default_password,
            mirror_interval=config.migration.mirror_interval,
            dry_run=config.migration.dry_run,
        )

        self.orchestrator = MigrationOrchestrator(self.context)

    async def migrate(self, plan: Optional[MigrationPlan] = None) -> MigrationSummary:
        """Execute migration with the given plan.

        Args:
            plan: Migration plan (uses default if not provided)

        Returns:
            Migration summary
        """
        if plan is None:
            plan = self._create_default_plan()

        self.logger.info('Starting GitLab to Gitea migration')

        try:
            await self._test_connectivity()

            summary = await self.orchestrator.execute_migration(plan)

            self.logger.info('Migration completed successfully')
            return summary
        finally:
            self.close()

    async def dry_run(self, plan: Optional[MigrationPlan] = None) -> MigrationSummary:
        """Perform a dry run of the migration.

        Args:
            plan: Migration plan (uses default if not provided)

        Returns:
            Migration summary (dry run results)
        """
        if plan is None:
            plan = self._create_default_plan()

        self.logger.info('Starting GitLab to Gitea migration dry run')

        try:
            await self._test_connectivity()

            summary = await self.orchestrator.dry_run_migration(plan)

            self.logger.info('Dry run completed successfully')
            return summary
        finally:
            self.close()

    def close(self) -> None:
        self.source_client.close()
        self.destination_client.close()

    def _create_default_plan(self) -> MigrationPlan:
        """Create default migration plan from configuration.

        Returns:
            Default migration plan
        """
        return MigrationPlan(
            migrate_users=self.config.migration.users,
            migrate_organizations=self.config.migration.organizations,
            migrate_repositories=self.config.migration.repositories,
            migrate_repository_metadata=self.config.migration.repository_metadata,
        )

    async def _test_connectivity(self) -> None:
        """Test connectivity to both instances.

        Raises:
            ConnectionError: If connectivity test fails
        """
        self.logger.info('Testing connectivity to GitLab and Gitea')

        if not self.source_client.test_connection():
            self._connection_failed('source GitLab')

        if not self.destination_client.test_connection():
            self._connection_failed('destination Gitea')

        self.logger.info('Connectivity tests passed')

    def _connection_failed(self, instance: str) -> None:
        message = f'Cannot connect to {instance} instance'
        self.logger.error(message)
        raise ConnectionError(message)
