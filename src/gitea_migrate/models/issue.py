"""Issue entity models."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import RequestOptions, StateType
from .label import GiteaLabel
from .milestone import GiteaMilestone, Milestone


class Issue(BaseModel):
    """GitLab issue model."""

    id: int = Field(..., description='Issue ID')
    iid: int = Field(..., description='Project-local issue number')
    title: str = Field(..., description='Issue title')
    description: Optional[str] = Field(default=None, description='Issue body')
    state: Optional[str] = Field(default=None, description="'opened' or 'closed'")
    due_date: Optional[date] = Field(default=None, description='Due date')
    milestone: Optional[Milestone] = Field(default=None, description='Milestone')
    labels: List[str] = Field(default_factory=list, description='Label names')


class GiteaIssue(BaseModel):
    """Gitea issue model."""

    id: int = Field(..., description='Issue ID')
    number: int = Field(..., description='Repository-local issue index')
    title: str = Field(..., description='Issue title')
    body: Optional[str] = Field(default='', description='Issue body')
    state: Optional[str] = Field(default=None, description='State')
    labels: List[GiteaLabel] = Field(default_factory=list, description='Labels')
    milestone: Optional[GiteaMilestone] = Field(default=None, description='Milestone')
    due_date: Optional[datetime] = Field(default=None, description='Deadline')


class IssueCreate(RequestOptions):
    """Request for creating an issue in a Gitea repository."""

    title: str = Field(..., description='Issue title')
    body: Optional[str] = Field(default='', description='Issue body')
    due_date: Optional[datetime] = Field(default=None, description='Deadline')
    milestone: Optional[int] = Field(default=None, description='Milestone ID')
    labels: List[int] = Field(default_factory=list, description='Label IDs')
    closed: Optional[bool] = Field(default=None, description='Create as closed')


class IssueEdit(RequestOptions):
    """Request for editing an existing Gitea issue.

    ``milestone`` is always sent; ``0`` unlinks the issue from any milestone.
    ``state`` is only sent when the source state was recognized.
    """

    title: str = Field(..., description='Issue title')
    body: Optional[str] = Field(default='', description='Issue body')
    milestone: int = Field(default=0, description='Milestone ID, 0 for none')
    due_date: Optional[datetime] = Field(default=None, description='Deadline')
    state: Optional[StateType] = Field(default=None, description='Issue state')


class IssueLabels(RequestOptions):
    """Request replacing the full label set of an issue."""

    labels: List[int] = Field(default_factory=list, description='Label IDs')
