"""Repository entity models."""

from typing import Optional

from pydantic import BaseModel, Field

from .common import RequestOptions


class Namespace(BaseModel):
    """Namespace a GitLab project lives in (a user or a group)."""

    id: int = Field(..., description='Namespace ID')
    name: Optional[str] = Field(default='', description='Namespace name')
    path: str = Field(..., description='Namespace path')
    kind: Optional[str] = Field(default=None, description="'user' or 'group'")
    full_path: str = Field(..., description='Full namespace path')


class Project(BaseModel):
    """GitLab project model."""

    id: int = Field(..., description='Project ID')
    name: str = Field(..., description='Project name')
    path: str = Field(..., description='Project path')
    path_with_namespace: str = Field(..., description='Full project path')
    description: Optional[str] = Field(default=None, description='Description')
    http_url_to_repo: str = Field(..., description='HTTP clone URL')
    namespace: Namespace = Field(..., description='Owning namespace')


class GiteaOwner(BaseModel):
    """Owner reference embedded in a Gitea repository."""

    id: int = Field(..., description='Owner ID')
    login: str = Field(..., description='Owner name')


class GiteaRepository(BaseModel):
    """Gitea repository model."""

    id: int = Field(..., description='Repository ID')
    name: str = Field(..., description='Repository name')
    full_name: str = Field(..., description='owner/name')
    owner: Optional[GiteaOwner] = Field(default=None, description='Owner')
    mirror: bool = Field(default=False, description='Repository is a pull mirror')
    private: bool = Field(default=False, description='Private repository')


class RepositoryMigrate(RequestOptions):
    """Mirror-import request for a GitLab repository."""

    clone_addr: str = Field(..., description='Source clone URL')
    repo_name: str = Field(..., description='Destination repository name')
    repo_owner: str = Field(..., description='Destination owner')
    service: str = Field(default='gitlab', description='Source service type')
    auth_token: Optional[str] = Field(default=None, description='Source token')
    mirror: bool = Field(default=True, description='Keep the repository mirrored')
    mirror_interval: str = Field(default='20m', description='Mirror refresh interval')
    private: bool = Field(default=True, description='Private repository')
    description: Optional[str] = Field(default=None, description='Description')

    labels: bool = Field(default=True, description='Import labels')
    issues: bool = Field(default=True, description='Import issues')
    wiki: bool = Field(default=True, description='Import wiki')
    milestones: bool = Field(default=True, description='Import milestones')
    pull_requests: bool = Field(default=True, description='Import pull requests')
    releases: bool = Field(default=True, description='Import releases')
