"""Organization entity models."""

from typing import Optional

from pydantic import BaseModel, Field

from .common import RequestOptions, Visibility


class Group(BaseModel):
    """GitLab group model."""

    id: int = Field(..., description='Group ID')
    name: str = Field(..., description='Group name')
    path: str = Field(..., description='Group path')
    full_path: str = Field(..., description='Full path including parent groups')
    description: Optional[str] = Field(default=None, description='Group description')
    web_url: Optional[str] = Field(default=None, description='Web URL')
    parent_id: Optional[int] = Field(default=None, description='Parent group ID')


class GiteaOrganization(BaseModel):
    """Gitea organization model."""

    id: int = Field(..., description='Organization ID')
    username: str = Field(..., description='Organization name')
    full_name: Optional[str] = Field(default='', description='Display name')
    description: Optional[str] = Field(default='', description='Description')
    website: Optional[str] = Field(default='', description='Website URL')
    visibility: Optional[str] = Field(default=None, description='Visibility')


class OrganizationCreate(RequestOptions):
    """Admin request for creating an organization owned by a user."""

    username: str = Field(..., description='Organization name')
    full_name: Optional[str] = Field(default='', description='Display name')
    description: Optional[str] = Field(default=None, description='Description')
    website: Optional[str] = Field(default=None, description='Website URL')
    visibility: Visibility = Field(
        default=Visibility.PUBLIC, description='Organization visibility'
    )
    repo_admin_change_team_access: bool = Field(
        default=True, description='Let repository admins manage team access'
    )
