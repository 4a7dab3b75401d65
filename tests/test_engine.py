"""Tests for the migration engine."""

import pytest
from unittest.mock import AsyncMock, patch

from gitea_migrate.api.exceptions import APIError
from gitea_migrate.api.gitea import GiteaClient
from gitea_migrate.api.gitlab import GitLabClient
from gitea_migrate.config.config import Config
from gitea_migrate.migration.engine import MigrationEngine
from gitea_migrate.migration.orchestrator import MigrationOrchestrator, MigrationPlan


class TestMigrationEngine:
    """Test engine wiring and connectivity checks."""

    def setup_method(self):
        """Set up test fixtures."""
        self.config = Config(
            source={
                'url': 'https://gitlab.example.com',
                'oauth_token': 'oauth',
                'page_size': 20,
            },
            destination={
                'url': 'https://gitea.example.com',
                'token': 'gitea-token',
                'admin_user': 'admin',
            },
            migration={'organizations': False, 'mirror_interval': '1h'},
        )

    def test_context_is_built_from_config(self):
        engine = MigrationEngine(self.config)

        assert isinstance(engine.source_client, GitLabClient)
        assert isinstance(engine.destination_client, GiteaClient)
        assert engine.context.source_page_size == 20
        assert engine.context.destination_page_size == 50
        assert engine.context.source_token == 'oauth'
        assert engine.context.admin_user == 'admin'
        assert engine.context.mirror_interval == '1h'

    def test_default_plan_follows_config(self):
        plan = MigrationEngine(self.config)._create_default_plan()

        assert plan == MigrationPlan(migrate_organizations=False)

    @pytest.mark.asyncio
    async def test_unreachable_source_aborts_before_any_phase(self):
        engine = MigrationEngine(self.config)

        with patch.object(GitLabClient, 'test_connection', return_value=False):
            with patch.object(
                MigrationOrchestrator, 'execute_migration', new_callable=AsyncMock
            ) as mock_execute:
                with pytest.raises(ConnectionError, match='source GitLab'):
                    await engine.migrate()

        mock_execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_unreachable_destination(self):
        engine = MigrationEngine(self.config)

        with patch.object(GitLabClient, 'test_connection', return_value=True):
            with patch.object(GiteaClient, 'test_connection', return_value=False):
                with pytest.raises(ConnectionError, match='destination Gitea'):
                    await engine.dry_run()

    @pytest.mark.asyncio
    async def test_migrate_runs_plan_and_closes_clients(self):
        engine = MigrationEngine(self.config)
        summary = object()

        with patch.object(GitLabClient, 'test_connection', return_value=True), patch.object(
            GiteaClient, 'test_connection', return_value=True
        ), patch.object(
            MigrationOrchestrator,
            'execute_migration',
            new_callable=AsyncMock,
            return_value=summary,
        ) as mock_execute, patch.object(
            MigrationEngine, 'close'
        ) as mock_close:
            result = await engine.migrate()

        assert result is summary
        mock_execute.assert_awaited_once_with(MigrationPlan(migrate_organizations=False))
        mock_close.assert_called_once()

    @pytest.mark.asyncio
    async def test_dry_run_uses_dry_run_orchestration(self):
        engine = MigrationEngine(self.config)

        with patch.object(GitLabClient, 'test_connection', return_value=True), patch.object(
            GiteaClient, 'test_connection', return_value=True
        ), patch.object(
            MigrationOrchestrator, 'dry_run_migration', new_callable=AsyncMock
        ) as mock_dry_run:
            await engine.dry_run(MigrationPlan(migrate_users=False))

        mock_dry_run.assert_awaited_once_with(MigrationPlan(migrate_users=False))

    @pytest.mark.asyncio
    async def test_unreachable_source_is_logged_once(self, error_logs):
        engine = MigrationEngine(self.config)

        with patch.object(GitLabClient, 'test_connection', return_value=False):
            with pytest.raises(ConnectionError):
                await engine.migrate()

        assert error_logs == ['Cannot connect to source GitLab instance']

    @pytest.mark.asyncio
    async def test_run_failure_is_left_to_the_orchestrator_log(self, error_logs):
        engine = MigrationEngine(self.config)

        with patch.object(GitLabClient, 'test_connection', return_value=True), patch.object(
            GiteaClient, 'test_connection', return_value=True
        ), patch.object(
            MigrationOrchestrator,
            'execute_migration',
            new_callable=AsyncMock,
            side_effect=APIError('create_label failed', status_code=500),
        ), patch.object(
            MigrationEngine, 'close'
        ) as mock_close:
            with pytest.raises(APIError):
                await engine.migrate()

        assert error_logs == []
        mock_close.assert_called_once()
