"""Shared fixtures: in-memory GitLab and Gitea stand-ins."""

from typing import Dict, List, Optional, Tuple

import pytest
from loguru import logger

from gitea_migrate.api.exceptions import APIError, NotFoundError
from gitea_migrate.api.gitea import GiteaClient
from gitea_migrate.api.gitlab import GitLabClient
from gitea_migrate.migration.strategy import MigrationContext
from gitea_migrate.models.issue import GiteaIssue, Issue
from gitea_migrate.models.label import GiteaLabel, Label
from gitea_migrate.models.milestone import GiteaMilestone, Milestone
from gitea_migrate.models.organization import GiteaOrganization, Group
from gitea_migrate.models.repository import GiteaOwner, GiteaRepository, Project
from gitea_migrate.models.user import GiteaUser, User


def _page(items, page, per_page):
    start = (page - 1) * per_page
    return list(items[start : start + per_page])


def make_project(project_id, namespace, path):
    return Project(
        id=project_id,
        name=path.title(),
        path=path,
        path_with_namespace=f'{namespace}/{path}',
        description=f'{path} project',
        http_url_to_repo=f'https://gitlab.example.com/{namespace}/{path}.git',
        namespace={
            'id': project_id * 10,
            'name': namespace,
            'path': namespace.rsplit('/', 1)[-1],
            'kind': 'group',
            'full_path': namespace,
        },
    )


class FakeGitLabClient(GitLabClient):
    """GitLab source backed by plain lists."""

    def __init__(self):
        self.users: List[User] = []
        self.groups: List[Group] = []
        self.projects: List[Project] = []
        self.milestones: Dict[int, List[Milestone]] = {}
        self.labels: Dict[int, List[Label]] = {}
        self.issues: Dict[int, List[Issue]] = {}
        self.requests: List[Tuple] = []

    async def list_users(self, page, per_page):
        self.requests.append(('users', page, per_page))
        return _page(self.users, page, per_page)

    async def list_groups(self, page, per_page, all_available=True):
        self.requests.append(('groups', page, per_page, all_available))
        return _page(self.groups, page, per_page)

    async def list_projects(self, page, per_page):
        self.requests.append(('projects', page, per_page))
        return _page(self.projects, page, per_page)

    async def list_milestones(self, project_id, page, per_page, state=None):
        self.requests.append(('milestones', project_id, page, per_page, state))
        items = self.milestones.get(project_id, [])
        if state:
            items = [m for m in items if m.state == state]
        return _page(items, page, per_page)

    async def list_labels(self, project_id, page, per_page):
        self.requests.append(('labels', project_id, page, per_page))
        return _page(self.labels.get(project_id, []), page, per_page)

    async def list_issues(self, project_id, page, per_page):
        self.requests.append(('issues', project_id, page, per_page))
        return _page(self.issues.get(project_id, []), page, per_page)

    def test_connection(self):
        return True

    def close(self):
        pass


class FakeGiteaClient(GiteaClient):
    """Gitea destination that keeps its state in dictionaries.

    ``writes`` records every mutating call; ``fail_on`` names methods that
    should raise an ``APIError``.
    """

    def __init__(self):
        self.users: Dict[str, GiteaUser] = {}
        self.orgs: Dict[str, GiteaOrganization] = {}
        self.repos: Dict[Tuple[str, str], GiteaRepository] = {}
        self.milestones: Dict[Tuple[str, str], List[GiteaMilestone]] = {}
        self.labels: Dict[Tuple[str, str], List[GiteaLabel]] = {}
        self.issues: Dict[Tuple[str, str], List[GiteaIssue]] = {}
        self.writes: List[Tuple] = []
        self.list_calls: List[Tuple] = []
        self.fail_on = set()
        self.created_payloads: List[dict] = []
        self._next_id = 1000

    def _new_id(self):
        self._next_id += 1
        return self._next_id

    def _check(self, name):
        if name in self.fail_on:
            raise APIError(f'{name} failed', status_code=500)

    # Seeding helpers

    def add_repo(self, owner, name):
        repo = GiteaRepository(
            id=self._new_id(),
            name=name,
            full_name=f'{owner}/{name}',
            owner=GiteaOwner(id=1, login=owner),
        )
        self.repos[(owner, name)] = repo
        return repo

    def add_milestone(self, owner, repo, title, state='open'):
        milestone = GiteaMilestone(id=self._new_id(), title=title, state=state)
        self.milestones.setdefault((owner, repo), []).append(milestone)
        return milestone

    def add_label(self, owner, repo, name, color='#000000'):
        label = GiteaLabel(id=self._new_id(), name=name, color=color)
        self.labels.setdefault((owner, repo), []).append(label)
        return label

    def add_issue(self, owner, repo, title, labels=(), state='open'):
        issues = self.issues.setdefault((owner, repo), [])
        issue = GiteaIssue(
            id=self._new_id(),
            number=len(issues) + 1,
            title=title,
            state=state,
            labels=list(labels),
        )
        issues.append(issue)
        return issue

    def issue(self, owner, repo, title) -> Optional[GiteaIssue]:
        for issue in self.issues.get((owner, repo), []):
            if issue.title == title:
                return issue
        return None

    # Users

    async def get_user(self, username):
        self._check('get_user')
        if username not in self.users:
            raise NotFoundError('Resource not found', status_code=404)
        return self.users[username]

    async def create_user(self, options):
        self._check('create_user')
        self.writes.append(('create_user', options.username))
        self.created_payloads.append(options.to_payload())
        user = GiteaUser(
            id=self._new_id(),
            login=options.username,
            full_name=options.full_name,
            email=options.email,
        )
        self.users[options.username] = user
        return user

    # Organizations

    async def get_org(self, name):
        self._check('get_org')
        if name not in self.orgs:
            raise NotFoundError('Resource not found', status_code=404)
        return self.orgs[name]

    async def create_org(self, owner, options):
        self._check('create_org')
        self.writes.append(('create_org', owner, options.username))
        self.created_payloads.append(options.to_payload())
        org = GiteaOrganization(
            id=self._new_id(), username=options.username, full_name=options.full_name
        )
        self.orgs[options.username] = org
        return org

    # Repositories

    async def get_repo(self, owner, name):
        self._check('get_repo')
        if (owner, name) not in self.repos:
            raise NotFoundError('Resource not found', status_code=404)
        return self.repos[(owner, name)]

    async def migrate_repo(self, options):
        self._check('migrate_repo')
        self.writes.append(('migrate_repo', options.repo_owner, options.repo_name))
        self.created_payloads.append(options.to_payload())
        return self.add_repo(options.repo_owner, options.repo_name)

    # Milestones

    async def list_milestones(self, owner, repo, page, limit, state='all'):
        self.list_calls.append(('milestones', owner, repo, page, limit, state))
        return _page(self.milestones.get((owner, repo), []), page, limit)

    async def create_milestone(self, owner, repo, options):
        self._check('create_milestone')
        self.writes.append(('create_milestone', owner, repo, options.title))
        self.created_payloads.append(options.to_payload())
        milestone = GiteaMilestone(
            id=self._new_id(),
            title=options.title,
            description=options.description,
            state=options.state.value if options.state else 'open',
            due_on=options.due_on,
        )
        self.milestones.setdefault((owner, repo), []).append(milestone)
        return milestone

    # Labels

    async def list_labels(self, owner, repo, page, limit):
        self.list_calls.append(('labels', owner, repo, page, limit))
        return _page(self.labels.get((owner, repo), []), page, limit)

    async def create_label(self, owner, repo, options):
        self._check('create_label')
        self.writes.append(('create_label', owner, repo, options.name))
        self.created_payloads.append(options.to_payload())
        label = GiteaLabel(
            id=self._new_id(),
            name=options.name,
            color=options.color,
            description=options.description,
        )
        self.labels.setdefault((owner, repo), []).append(label)
        return label

    # Issues

    def _labels_by_id(self, owner, repo, label_ids):
        known = {label.id: label for label in self.labels.get((owner, repo), [])}
        return [known[label_id] for label_id in label_ids]

    def _milestone_by_id(self, owner, repo, milestone_id):
        for milestone in self.milestones.get((owner, repo), []):
            if milestone.id == milestone_id:
                return milestone
        return None

    async def list_issues(self, owner, repo, page, limit, state='all'):
        self.list_calls.append(('issues', owner, repo, page, limit, state))
        return _page(self.issues.get((owner, repo), []), page, limit)

    async def create_issue(self, owner, repo, options):
        self._check('create_issue')
        self.writes.append(('create_issue', owner, repo, options.title))
        self.created_payloads.append(options.to_payload())
        issues = self.issues.setdefault((owner, repo), [])
        issue = GiteaIssue(
            id=self._new_id(),
            number=len(issues) + 1,
            title=options.title,
            body=options.body,
            state='closed' if options.closed else 'open',
            labels=self._labels_by_id(owner, repo, options.labels),
            milestone=self._milestone_by_id(owner, repo, options.milestone),
            due_date=options.due_date,
        )
        issues.append(issue)
        return issue

    async def edit_issue(self, owner, repo, index, options):
        self._check('edit_issue')
        self.writes.append(('edit_issue', owner, repo, index))
        self.created_payloads.append(options.to_payload())
        issues = self.issues[(owner, repo)]
        position = next(i for i, issue in enumerate(issues) if issue.number == index)
        update = {
            'title': options.title,
            'body': options.body,
            'milestone': self._milestone_by_id(owner, repo, options.milestone),
            'due_date': options.due_date,
        }
        if options.state is not None:
            update['state'] = options.state.value
        issues[position] = issues[position].model_copy(update=update)
        return issues[position]

    async def replace_issue_labels(self, owner, repo, index, label_ids):
        self._check('replace_issue_labels')
        self.writes.append(('replace_issue_labels', owner, repo, index))
        issues = self.issues[(owner, repo)]
        position = next(i for i, issue in enumerate(issues) if issue.number == index)
        labels = self._labels_by_id(owner, repo, label_ids)
        issues[position] = issues[position].model_copy(update={'labels': labels})
        return labels

    def test_connection(self):
        return True

    def close(self):
        pass


@pytest.fixture
def gitlab():
    return FakeGitLabClient()


@pytest.fixture
def gitea():
    return FakeGiteaClient()


@pytest.fixture
def context(gitlab, gitea):
    return MigrationContext(
        source_client=gitlab,
        destination_client=gitea,
        source_page_size=100,
        destination_page_size=2,
        source_token='gitlab-token',
        admin_user='admin',
    )


@pytest.fixture
def error_logs():
    """Collect messages logged at ERROR level or above."""
    messages = []
    handler_id = logger.add(
        lambda message: messages.append(message.record['message']), level='ERROR'
    )
    yield messages
    logger.remove(handler_id)
