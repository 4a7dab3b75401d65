"""User entity models."""

from typing import Optional

from pydantic import BaseModel, Field

from .common import RequestOptions, Visibility

# Synthetic GitLab account that stands in for deleted users.
GHOST_USERNAME = 'ghost'


class User(BaseModel):
    """GitLab user model."""

    id: int = Field(..., description='User ID')
    username: str = Field(..., description='Username')
    name: Optional[str] = Field(default='', description='Full name')
    email: Optional[str] = Field(default=None, description='Email address')
    state: Optional[str] = Field(default=None, description='User state')
    web_url: Optional[str] = Field(default=None, description='Web URL')

    @property
    def is_ghost(self) -> bool:
        """Whether this is the placeholder account for deleted users."""
        return self.username == GHOST_USERNAME


class GiteaUser(BaseModel):
    """Gitea user model."""

    id: int = Field(..., description='User ID')
    login: str = Field(..., description='Username')
    full_name: Optional[str] = Field(default='', description='Full name')
    email: Optional[str] = Field(default=None, description='Email address')
    is_admin: bool = Field(default=False, description='Site administrator')


class UserCreate(RequestOptions):
    """Admin request for creating a new Gitea user."""

    username: str = Field(..., description='Username')
    email: Optional[str] = Field(default=None, description='Email address')
    full_name: Optional[str] = Field(default='', description='Full name')
    password: str = Field(..., description='Initial password')
    must_change_password: bool = Field(
        default=True, description='Force a password change on next login'
    )
    visibility: Visibility = Field(
        default=Visibility.PUBLIC, description='Profile visibility'
    )
    source_id: int = Field(default=0, description='Authentication source (0 = local)')
