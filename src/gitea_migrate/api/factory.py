"""Factory for the source and destination API clients."""

from ..config.config import GiteaInstanceConfig, GitLabInstanceConfig
from .exceptions import AuthenticationError
from .gitea import GiteaClient
from .gitlab import GitLabClient


class ClientFactory:
    """Factory for creating remote API clients."""

    @staticmethod
    def create_source_client(config: GitLabInstanceConfig) -> GitLabClient:
        """Create the GitLab client from configuration.

        Raises:
            AuthenticationError: If authentication configuration is invalid
        """
        if not config.token and not config.oauth_token:
            raise AuthenticationError('Either token or oauth_token must be provided')

        return GitLabClient(config)

    @staticmethod
    def create_destination_client(config: GiteaInstanceConfig) -> GiteaClient:
        """Create the Gitea client from configuration.

        Raises:
            AuthenticationError: If no token is configured
        """
        if not config.token:
            raise AuthenticationError('A Gitea access token must be provided')

        return GiteaClient(config)
