"""Gitea Migration Tool

Mirrors users, organizations, repositories, milestones, labels and issues
from a GitLab instance into a Gitea instance. Every run re-scans the source
and only creates or updates what is missing or out of date.
"""

__version__ = '0.1.0'

__all__ = ['__version__']
