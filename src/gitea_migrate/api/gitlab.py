"""Read-only GitLab API client used as the migration source."""

from typing import Dict, List, Optional

from ..config.config import GitLabInstanceConfig
from ..models.issue import Issue
from ..models.label import Label
from ..models.milestone import Milestone
from ..models.organization import Group
from ..models.repository import Project
from ..models.user import User
from .client import APIClient
from .exceptions import AuthenticationError


class GitLabClient(APIClient):
    """GitLab API client.

    Every ``list_*`` method fetches exactly one page. Iterating over a whole
    collection is left to the caller (see ``migration.pager``).
    """

    service_name = 'GitLab'

    def __init__(self, config: GitLabInstanceConfig):
        self.api_path = f'/api/{config.api_version}'
        super().__init__(config)

    def _auth_headers(self) -> Dict[str, str]:
        if self.config.token:
            return {'Private-Token': self.config.token}
        if self.config.oauth_token:
            return {'Authorization': f'Bearer {self.config.oauth_token}'}
        raise AuthenticationError('No authentication token provided')

    async def list_users(self, page: int, per_page: int) -> List[User]:
        """List one page of users."""
        response = await self.get_async(
            '/users', params={'page': page, 'per_page': per_page}
        )
        return [User.model_validate(item) for item in response.data or []]

    async def list_groups(
        self, page: int, per_page: int, all_available: bool = True
    ) -> List[Group]:
        """List one page of groups, including subgroups."""
        response = await self.get_async(
            '/groups',
            params={
                'page': page,
                'per_page': per_page,
                'all_available': 'true' if all_available else 'false',
            },
        )
        return [Group.model_validate(item) for item in response.data or []]

    async def list_projects(self, page: int, per_page: int) -> List[Project]:
        """List one page of projects."""
        response = await self.get_async(
            '/projects', params={'page': page, 'per_page': per_page}
        )
        return [Project.model_validate(item) for item in response.data or []]

    async def list_milestones(
        self,
        project_id: int,
        page: int,
        per_page: int,
        state: Optional[str] = None,
    ) -> List[Milestone]:
        """List one page of project milestones, optionally filtered by state."""
        params = {'page': page, 'per_page': per_page}
        if state:
            params['state'] = state

        response = await self.get_async(
            f'/projects/{project_id}/milestones', params=params
        )
        return [Milestone.model_validate(item) for item in response.data or []]

    async def list_labels(
        self, project_id: int, page: int, per_page: int
    ) -> List[Label]:
        """List one page of project labels."""
        response = await self.get_async(
            f'/projects/{project_id}/labels',
            params={'page': page, 'per_page': per_page},
        )
        return [Label.model_validate(item) for item in response.data or []]

    async def list_issues(
        self, project_id: int, page: int, per_page: int
    ) -> List[Issue]:
        """List one page of project issues in any state."""
        response = await self.get_async(
            f'/projects/{project_id}/issues',
            params={'page': page, 'per_page': per_page},
        )
        return [Issue.model_validate(item) for item in response.data or []]
