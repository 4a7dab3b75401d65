"""Shared enums and helpers for Gitea request payloads."""

from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class StateType(str, Enum):
    """Gitea issue and milestone state."""

    OPEN = 'open'
    CLOSED = 'closed'


class Visibility(str, Enum):
    """Gitea user and organization visibility."""

    PUBLIC = 'public'
    LIMITED = 'limited'
    PRIVATE = 'private'


class RequestOptions(BaseModel):
    """Base class for write requests sent to Gitea.

    Unset optional fields are left out of the request body so that Gitea
    keeps its default (or current) value for them.
    """

    def to_payload(self) -> Dict[str, Any]:
        """Serialize the options into a JSON request body."""
        return self.model_dump(mode='json', exclude_none=True)


def to_deadline(value: Optional[date]) -> Optional[datetime]:
    """Turn a GitLab due date into a Gitea deadline at midnight UTC."""
    if value is None:
        return None
    return datetime.combine(value, time.min, tzinfo=timezone.utc)
