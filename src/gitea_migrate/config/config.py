"""Configuration management for the GitLab to Gitea migration tool."""

from typing import Optional, Dict, Any
from pathlib import Path
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import yaml
from dotenv import load_dotenv


class InstanceConfig(BaseModel):
    """Connection settings shared by both remote instances."""

    url: str = Field(..., description='Instance URL')
    token: Optional[str] = Field(default=None, description='Personal access token')
    timeout: int = Field(default=30, description='Request timeout in seconds')
    rate_limit_per_second: float = Field(
        default=10.0, description='API requests per second limit'
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate instance URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('rate_limit_per_second')
    @classmethod
    def validate_rate_limit(cls, v):
        """Validate rate limit is positive."""
        if v <= 0:
            raise ValueError('Rate limit must be positive')
        return v

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Timeout must be positive')
        return v


class GitLabInstanceConfig(InstanceConfig):
    """Configuration for the source GitLab instance."""

    oauth_token: Optional[str] = Field(default=None, description='OAuth access token')
    api_version: str = Field(default='v4', description='GitLab API version')
    page_size: int = Field(default=100, description='Items per source page')

    @model_validator(mode='after')
    def validate_auth_complete(self):
        """Ensure at least one authentication method is provided."""
        if not self.token and not self.oauth_token:
            raise ValueError('Either token or oauth_token must be provided')
        return self

    @field_validator('page_size')
    @classmethod
    def validate_page_size(cls, v):
        """Validate page size is positive."""
        if v <= 0:
            raise ValueError('Page size must be positive')
        return v


class GiteaInstanceConfig(InstanceConfig):
    """Configuration for the destination Gitea instance."""

    api_version: str = Field(default='v1', description='Gitea API version')
    page_size: int = Field(default=50, description='Items per destination page')
    admin_user: str = Field(
        default='root', description='Admin user that owns created organizations'
    )

    @model_validator(mode='after')
    def validate_auth_complete(self):
        """Ensure an access token is provided."""
        if not self.token:
            raise ValueError('A Gitea access token must be provided')
        return self

    @field_validator('page_size')
    @classmethod
    def validate_page_size(cls, v):
        """Validate page size is positive."""
        if v <= 0:
            raise ValueError('Page size must be positive')
        return v


class MigrationConfig(BaseModel):
    """Migration-specific configuration."""

    users: bool = Field(default=True, description='Migrate users')
    organizations: bool = Field(default=True, description='Migrate organizations')
    repositories: bool = Field(default=True, description='Migrate repositories')
    repository_metadata: bool = Field(
        default=True,
        description='Migrate milestones, labels and issues of every repository',
    )

    default_password: str = Field(
        default='FD12345678', description='Initial password for created users'
    )
    mirror_interval: str = Field(
        default='20m', description='Mirror refresh interval for imported repos'
    )

    dry_run: bool = Field(default=False, description='Perform dry run without changes')

    @field_validator('default_password')
    @classmethod
    def validate_default_password(cls, v):
        """Validate the initial password is usable."""
        if len(v) < 8:
            raise ValueError('Default password must be at least 8 characters')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default=None, description='Log file path')
    format: str = Field(
        default='{time:YYYY-MM-DD HH:mm:ss} | {level} | {origin} | {message}',
        description='Log format',
    )

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


TEMPLATE_CONFIG: Dict[str, Any] = {
    'source': {
        'url': 'https://gitlab.example.com',
        'token': 'your-gitlab-personal-access-token',
        'api_version': 'v4',
        'timeout': 30,
        'page_size': 100,
    },
    'destination': {
        'url': 'https://gitea.example.com',
        'token': 'your-gitea-admin-access-token',
        'api_version': 'v1',
        'timeout': 30,
        'page_size': 50,
        'admin_user': 'root',
    },
    'migration': {
        'users': True,
        'organizations': True,
        'repositories': True,
        'repository_metadata': True,
        'default_password': 'FD12345678',
        'mirror_interval': '20m',
        'dry_run': False,
    },
    'logging': {
        'level': 'INFO',
        'file': 'migration.log',
        'format': '{time:YYYY-MM-DD HH:mm:ss} | {level} | {origin} | {message}',
    },
}


class Config(BaseModel):
    """Main configuration class for the migration tool."""

    model_config = ConfigDict(extra='forbid')

    source: GitLabInstanceConfig = Field(..., description='Source GitLab instance')
    destination: GiteaInstanceConfig = Field(
        ..., description='Destination Gitea instance'
    )
    migration: MigrationConfig = Field(
        default_factory=MigrationConfig, description='Migration settings'
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        # Load .env file if it exists
        load_dotenv()

        config_data = {
            'source': {
                'url': os.getenv('SOURCE_GITLAB_URL'),
                'token': os.getenv('SOURCE_GITLAB_TOKEN'),
            },
            'destination': {
                'url': os.getenv('DEST_GITEA_URL'),
                'token': os.getenv('DEST_GITEA_TOKEN'),
                'admin_user': os.getenv('GITEA_ADMIN_USER'),
            },
            'migration': {
                'default_password': os.getenv('MIGRATION_DEFAULT_PASSWORD'),
                'mirror_interval': os.getenv('MIGRATION_MIRROR_INTERVAL'),
                'dry_run': os.getenv('MIGRATION_DRY_RUN', 'false').lower() == 'true',
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', 'INFO'),
                'file': os.getenv('LOG_FILE'),
            },
        }

        # Remove None values
        config_data = cls._remove_none_values(config_data)

        return cls(**config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None
            }
        return data

    def to_file(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                self.model_dump(),
                f,
                default_flow_style=False,
                indent=2,
                sort_keys=False,
            )

    @staticmethod
    def create_template(output_path: str) -> None:
        """Create a configuration template file."""
        config_file = Path(output_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                TEMPLATE_CONFIG, f, default_flow_style=False, indent=2, sort_keys=False
            )
