"""Gitea API client used as the migration destination."""

from typing import Dict, List
from urllib.parse import quote

from ..config.config import GiteaInstanceConfig
from ..models.issue import GiteaIssue, IssueCreate, IssueEdit, IssueLabels
from ..models.label import GiteaLabel, LabelCreate
from ..models.milestone import GiteaMilestone, MilestoneCreate
from ..models.organization import GiteaOrganization, OrganizationCreate
from ..models.repository import GiteaRepository, RepositoryMigrate
from ..models.user import GiteaUser, UserCreate
from .client import APIClient
from .exceptions import AuthenticationError


def _repo_path(owner: str, repo: str) -> str:
    return f'/repos/{quote(owner, safe="")}/{quote(repo, safe="")}'


class GiteaClient(APIClient):
    """Gitea API client.

    ``get_*`` methods raise ``NotFoundError`` when the entity does not exist.
    The token must belong to a site administrator, since users and
    organizations are created through the admin endpoints.
    """

    service_name = 'Gitea'

    def __init__(self, config: GiteaInstanceConfig):
        self.api_path = f'/api/{config.api_version}'
        super().__init__(config)

    def _auth_headers(self) -> Dict[str, str]:
        if not self.config.token:
            raise AuthenticationError('No authentication token provided')
        return {'Authorization': f'token {self.config.token}'}

    # Users

    async def get_user(self, username: str) -> GiteaUser:
        response = await self.get_async(f'/users/{quote(username, safe="")}')
        return GiteaUser.model_validate(response.data)

    async def create_user(self, options: UserCreate) -> GiteaUser:
        response = await self.post_async('/admin/users', data=options.to_payload())
        return GiteaUser.model_validate(response.data)

    # Organizations

    async def get_org(self, name: str) -> GiteaOrganization:
        response = await self.get_async(f'/orgs/{quote(name, safe="")}')
        return GiteaOrganization.model_validate(response.data)

    async def create_org(
        self, owner: str, options: OrganizationCreate
    ) -> GiteaOrganization:
        """Create an organization on behalf of ``owner`` (admin endpoint)."""
        response = await self.post_async(
            f'/admin/users/{quote(owner, safe="")}/orgs', data=options.to_payload()
        )
        return GiteaOrganization.model_validate(response.data)

    # Repositories

    async def get_repo(self, owner: str, name: str) -> GiteaRepository:
        response = await self.get_async(_repo_path(owner, name))
        return GiteaRepository.model_validate(response.data)

    async def migrate_repo(self, options: RepositoryMigrate) -> GiteaRepository:
        """Ask Gitea to import (and keep mirroring) a remote repository."""
        response = await self.post_async('/repos/migrate', data=options.to_payload())
        return GiteaRepository.model_validate(response.data)

    # Milestones

    async def list_milestones(
        self, owner: str, repo: str, page: int, limit: int, state: str = 'all'
    ) -> List[GiteaMilestone]:
        response = await self.get_async(
            f'{_repo_path(owner, repo)}/milestones',
            params={'state': state, 'page': page, 'limit': limit},
        )
        return [GiteaMilestone.model_validate(item) for item in response.data or []]

    async def create_milestone(
        self, owner: str, repo: str, options: MilestoneCreate
    ) -> GiteaMilestone:
        response = await self.post_async(
            f'{_repo_path(owner, repo)}/milestones', data=options.to_payload()
        )
        return GiteaMilestone.model_validate(response.data)

    # Labels

    async def list_labels(
        self, owner: str, repo: str, page: int, limit: int
    ) -> List[GiteaLabel]:
        response = await self.get_async(
            f'{_repo_path(owner, repo)}/labels',
            params={'page': page, 'limit': limit},
        )
        return [GiteaLabel.model_validate(item) for item in response.data or []]

    async def create_label(
        self, owner: str, repo: str, options: LabelCreate
    ) -> GiteaLabel:
        response = await self.post_async(
            f'{_repo_path(owner, repo)}/labels', data=options.to_payload()
        )
        return GiteaLabel.model_validate(response.data)

    # Issues

    async def list_issues(
        self, owner: str, repo: str, page: int, limit: int, state: str = 'all'
    ) -> List[GiteaIssue]:
        """List one page of issues; pull requests are excluded."""
        response = await self.get_async(
            f'{_repo_path(owner, repo)}/issues',
            params={'state': state, 'type': 'issues', 'page': page, 'limit': limit},
        )
        return [GiteaIssue.model_validate(item) for item in response.data or []]

    async def create_issue(
        self, owner: str, repo: str, options: IssueCreate
    ) -> GiteaIssue:
        response = await self.post_async(
            f'{_repo_path(owner, repo)}/issues', data=options.to_payload()
        )
        return GiteaIssue.model_validate(response.data)

    async def edit_issue(
        self, owner: str, repo: str, index: int, options: IssueEdit
    ) -> GiteaIssue:
        response = await self.patch_async(
            f'{_repo_path(owner, repo)}/issues/{index}', data=options.to_payload()
        )
        return GiteaIssue.model_validate(response.data)

    async def replace_issue_labels(
        self, owner: str, repo: str, index: int, label_ids: List[int]
    ) -> List[GiteaLabel]:
        """Replace the whole label set of an issue."""
        response = await self.put_async(
            f'{_repo_path(owner, repo)}/issues/{index}/labels',
            data=IssueLabels(labels=label_ids).to_payload(),
        )
        return [GiteaLabel.model_validate(item) for item in response.data or []]
