"""Remote API clients for GitLab (source) and Gitea (destination)."""

from .client import APIClient, APIResponse
from .exceptions import (
    APIError,
    AccessDeniedError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from .factory import ClientFactory
from .gitea import GiteaClient
from .gitlab import GitLabClient

__all__ = [
    'APIClient',
    'APIResponse',
    'APIError',
    'AccessDeniedError',
    'AuthenticationError',
    'NotFoundError',
    'RateLimitError',
    'ValidationError',
    'ClientFactory',
    'GiteaClient',
    'GitLabClient',
]
