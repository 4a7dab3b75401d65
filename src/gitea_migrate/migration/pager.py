"""Page-by-page iteration over remote collections."""

from typing import AsyncIterator, Awaitable, Callable, Generic, List, Sequence, TypeVar

from loguru import logger

T = TypeVar('T')

PageFetcher = Callable[[int, int], Awaitable[Sequence[T]]]

DEFAULT_PAGE_SIZE = 100


class Pager(Generic[T]):
    """Lazy iterator over every item of a paginated collection.

    Pages are requested one at a time starting from page 1. Iteration stops
    as soon as a page comes back empty; that is the only termination
    condition. Errors raised while fetching a page propagate to the caller.

    A pager can be iterated more than once. Each iteration restarts from
    page 1.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        per_page: int = DEFAULT_PAGE_SIZE,
        description: str = 'items',
    ):
        """Initialize the pager.

        Args:
            fetch_page: Coroutine function taking ``(page, per_page)``
            per_page: Number of items requested per page
            description: Collection name used in log messages
        """
        self.fetch_page = fetch_page
        self.per_page = per_page
        self.description = description
        self.pages_fetched = 0

    def __aiter__(self) -> AsyncIterator[T]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        page = 1
        total = 0
        while True:
            items = await self.fetch_page(page, self.per_page)
            self.pages_fetched += 1
            if not items:
                logger.debug(
                    f'Fetched {total} {self.description} in {page - 1} page(s)'
                )
                return

            total += len(items)
            for item in items:
                yield item
            page += 1

    async def collect(self) -> List[T]:
        """Fetch every page and return all items as a list."""
        return [item async for item in self]
