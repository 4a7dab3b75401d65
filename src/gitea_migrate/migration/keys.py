"""Natural keys used to match GitLab entities with their Gitea counterparts.

GitLab and Gitea assign unrelated numeric IDs, so entities are matched by a
human-meaningful field instead. Gitea has a flat owner namespace, which means
nested GitLab paths are flattened before they are used as an owner name.
"""

from typing import NamedTuple

from ..models.issue import Issue
from ..models.label import Label
from ..models.milestone import Milestone
from ..models.organization import Group
from ..models.repository import Project
from ..models.user import User

NAMESPACE_SEPARATOR = '/'
FLAT_NAMESPACE_SEPARATOR = '_'


class RepositoryKey(NamedTuple):
    """Destination owner and name of a repository."""

    owner: str
    name: str

    def __str__(self) -> str:
        return f'{self.owner}/{self.name}'


def normalize_namespace(full_path: str) -> str:
    """Flatten a hierarchical GitLab path into a Gitea owner name.

    ``"a/b"`` and ``"a_b"`` both become ``"a_b"``.
    """
    return full_path.replace(NAMESPACE_SEPARATOR, FLAT_NAMESPACE_SEPARATOR)


def user_key(user: User) -> str:
    return user.username


def organization_key(group: Group) -> str:
    return normalize_namespace(group.full_path)


def repository_key(project: Project) -> RepositoryKey:
    return RepositoryKey(
        owner=normalize_namespace(project.namespace.full_path), name=project.path
    )


def milestone_key(milestone: Milestone) -> str:
    return milestone.title


def label_key(label: Label) -> str:
    return label.name


def issue_key(issue: Issue) -> str:
    return issue.title
