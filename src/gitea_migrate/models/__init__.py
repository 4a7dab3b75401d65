"""Data models for GitLab source and Gitea destination entities."""

from .common import StateType, Visibility
from .user import User, GiteaUser, UserCreate
from .organization import Group, GiteaOrganization, OrganizationCreate
from .repository import Namespace, Project, GiteaRepository, RepositoryMigrate
from .milestone import Milestone, GiteaMilestone, MilestoneCreate
from .label import Label, GiteaLabel, LabelCreate
from .issue import Issue, GiteaIssue, IssueCreate, IssueEdit, IssueLabels

__all__ = [
    'StateType',
    'Visibility',
    'User',
    'GiteaUser',
    'UserCreate',
    'Group',
    'GiteaOrganization',
    'OrganizationCreate',
    'Namespace',
    'Project',
    'GiteaRepository',
    'RepositoryMigrate',
    'Milestone',
    'GiteaMilestone',
    'MilestoneCreate',
    'Label',
    'GiteaLabel',
    'LabelCreate',
    'Issue',
    'GiteaIssue',
    'IssueCreate',
    'IssueEdit',
    'IssueLabels',
]
