"""Milestone entity models."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import RequestOptions, StateType


class Milestone(BaseModel):
    """GitLab milestone model."""

    id: int = Field(..., description='Milestone ID')
    iid: Optional[int] = Field(default=None, description='Project-local ID')
    title: str = Field(..., description='Milestone title')
    description: Optional[str] = Field(default=None, description='Description')
    state: Optional[str] = Field(default=None, description="'active' or 'closed'")
    due_date: Optional[date] = Field(default=None, description='Due date')


class GiteaMilestone(BaseModel):
    """Gitea milestone model."""

    id: int = Field(..., description='Milestone ID')
    title: str = Field(..., description='Milestone title')
    description: Optional[str] = Field(default='', description='Description')
    state: Optional[str] = Field(default=None, description='State')
    due_on: Optional[datetime] = Field(default=None, description='Deadline')


class MilestoneCreate(RequestOptions):
    """Request for creating a milestone in a Gitea repository."""

    title: str = Field(..., description='Milestone title')
    description: Optional[str] = Field(default=None, description='Description')
    due_on: Optional[datetime] = Field(default=None, description='Deadline')
    state: Optional[StateType] = Field(default=None, description='Initial state')
