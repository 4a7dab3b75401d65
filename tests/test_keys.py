"""Tests for natural keys and namespace flattening."""

from gitea_migrate.migration.keys import (
    RepositoryKey,
    issue_key,
    label_key,
    milestone_key,
    normalize_namespace,
    organization_key,
    repository_key,
    user_key,
)
from gitea_migrate.models.issue import Issue
from gitea_migrate.models.label import Label
from gitea_migrate.models.milestone import Milestone
from gitea_migrate.models.organization import Group
from gitea_migrate.models.user import User

from conftest import make_project


class TestNormalizeNamespace:
    """Test flattening of hierarchical GitLab paths."""

    def test_nested_path(self):
        assert normalize_namespace('a/b') == 'a_b'

    def test_deeply_nested_path(self):
        assert normalize_namespace('company/team/backend') == 'company_team_backend'

    def test_flat_path_is_unchanged(self):
        assert normalize_namespace('platform') == 'platform'

    def test_slash_and_underscore_collide(self):
        """Test that 'a/b' and 'a_b' map to the same owner."""
        assert normalize_namespace('a/b') == normalize_namespace('a_b')


class TestEntityKeys:
    """Test the natural key of each entity kind."""

    def test_user_key(self):
        user = User(id=1, username='alice', name='Alice')
        assert user_key(user) == 'alice'

    def test_organization_key(self):
        group = Group(id=1, name='Backend', path='backend', full_path='company/backend')
        assert organization_key(group) == 'company_backend'

    def test_repository_key(self):
        project = make_project(7, 'company/backend', 'api')

        key = repository_key(project)

        assert key == RepositoryKey(owner='company_backend', name='api')
        assert str(key) == 'company_backend/api'

    def test_repository_keys_collide_for_flattened_namespaces(self):
        nested = make_project(1, 'a/b', 'repo')
        flat = make_project(2, 'a_b', 'repo')

        assert repository_key(nested) == repository_key(flat)

    def test_titles_and_names(self):
        milestone = Milestone(id=1, title='v1.0')
        label = Label(id=2, name='bug', color='#ff0000')
        issue = Issue(id=3, iid=1, title='Crash on start')

        assert milestone_key(milestone) == 'v1.0'
        assert label_key(label) == 'bug'
        assert issue_key(issue) == 'Crash on start'
