"""Label entity models."""

from typing import Optional

from pydantic import BaseModel, Field

from .common import RequestOptions


class Label(BaseModel):
    """GitLab label model."""

    id: int = Field(..., description='Label ID')
    name: str = Field(..., description='Label name')
    color: str = Field(..., description='Color, e.g. #FF0000')
    description: Optional[str] = Field(default=None, description='Description')


class GiteaLabel(BaseModel):
    """Gitea label model."""

    id: int = Field(..., description='Label ID')
    name: str = Field(..., description='Label name')
    color: Optional[str] = Field(default='', description='Color')
    description: Optional[str] = Field(default='', description='Description')


class LabelCreate(RequestOptions):
    """Request for creating a label in a Gitea repository."""

    name: str = Field(..., description='Label name')
    color: str = Field(..., description='Color, passed through unchanged')
    description: Optional[str] = Field(default=None, description='Description')
