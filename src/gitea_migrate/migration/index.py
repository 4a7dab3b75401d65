"""Existence indices over destination collections.

An index maps a natural key to the Gitea entity that currently carries it.
It is built by paging through a whole destination collection once per run
and is never persisted.
"""

from typing import Callable, Dict, Generic, Iterator, Optional, TypeVar

from loguru import logger

from ..api.gitea import GiteaClient
from ..models.issue import GiteaIssue
from ..models.label import GiteaLabel
from ..models.milestone import GiteaMilestone
from .pager import PageFetcher, Pager

K = TypeVar('K')
E = TypeVar('E')


class ExistenceIndex(Generic[K, E]):
    """Mapping of natural key to destination entity within one scope.

    When two entities share a key the last one added wins. Collisions are
    counted rather than rejected.
    """

    def __init__(self, kind: str, scope: str):
        self.kind = kind
        self.scope = scope
        self.collisions = 0
        self._entries: Dict[K, E] = {}

    def add(self, key: K, entity: E) -> None:
        if key in self._entries:
            self.collisions += 1
            logger.debug(f'Duplicate {self.kind} key {key!r} in {self.scope}')
        self._entries[key] = entity

    def get(self, key: K) -> Optional[E]:
        return self._entries.get(key)

    def id_of(self, key: K) -> Optional[int]:
        """Return the destination ID for ``key``, if present."""
        entity = self._entries.get(key)
        return getattr(entity, 'id', None) if entity is not None else None

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f'ExistenceIndex({self.kind!r}, {self.scope!r}, size={len(self)})'


async def build_index(
    kind: str,
    scope: str,
    fetch_page: PageFetcher,
    per_page: int,
    key: Callable[[E], K],
) -> ExistenceIndex[K, E]:
    """Page through a destination collection and index it by natural key.

    Args:
        kind: Entity kind, used in log messages
        scope: Destination scope, e.g. ``owner/repo``
        fetch_page: Coroutine function taking ``(page, per_page)``
        per_page: Destination page size
        key: Natural key extractor

    Returns:
        The populated index
    """
    index: ExistenceIndex[K, E] = ExistenceIndex(kind, scope)
    async for entity in Pager(fetch_page, per_page, description=f'{kind}s'):
        index.add(key(entity), entity)

    logger.debug(f'Indexed {len(index)} existing {kind}s in {scope}')
    return index


async def build_milestone_index(
    client: GiteaClient, owner: str, repo: str, per_page: int
) -> ExistenceIndex[str, GiteaMilestone]:
    """Index open and closed milestones of a repository by title."""

    async def fetch(page: int, limit: int):
        return await client.list_milestones(owner, repo, page, limit, state='all')

    return await build_index(
        'milestone', f'{owner}/{repo}', fetch, per_page, lambda m: m.title
    )


async def build_label_index(
    client: GiteaClient, owner: str, repo: str, per_page: int
) -> ExistenceIndex[str, GiteaLabel]:
    """Index labels of a repository by name."""

    async def fetch(page: int, limit: int):
        return await client.list_labels(owner, repo, page, limit)

    return await build_index(
        'label', f'{owner}/{repo}', fetch, per_page, lambda label: label.name
    )


async def build_issue_index(
    client: GiteaClient, owner: str, repo: str, per_page: int
) -> ExistenceIndex[str, GiteaIssue]:
    """Index open and closed issues of a repository by title."""

    async def fetch(page: int, limit: int):
        return await client.list_issues(owner, repo, page, limit, state='all')

    return await build_index(
        'issue', f'{owner}/{repo}', fetch, per_page, lambda issue: issue.title
    )
