"""
HistoryListController - paginated demo history with client-side sort.

Per-page behavior:
- load_page() clamps the requested page into [1, total_pages] first
- A failed load keeps the previous page's items and records the error
- sort() reorders only the loaded page, without refetching
- delete() removes an item only after the server acknowledges it
"""

import logging
from enum import Enum
from typing import Protocol, assert_never

from demo_client.exceptions import DemoClientError
from demo_client.types import Demo, DemoId, HistoryPage

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class HistorySource(Protocol):
    """The subset of APIClient the history controller needs."""

    async def get_history(self, page: int = 1, page_size: int = 10) -> HistoryPage: ...

    async def delete_demo(self, demo_id: DemoId) -> None: ...


class SortCriterion(str, Enum):
    """Client-side orderings for a loaded history page."""

    RECENT = "recent"
    OLDEST = "oldest"
    DURATION = "duration"


def sort_demos(demos: list[Demo], criterion: SortCriterion) -> list[Demo]:
    """
    Return a sorted copy of demos.

    RECENT/OLDEST order by created_at descending/ascending. DURATION orders
    longest first, with demos lacking a duration after all that have one.
    The sort is stable, so ties keep their server order.
    """
    match criterion:
        case SortCriterion.RECENT:
            return sorted(demos, key=lambda d: d.created_at, reverse=True)
        case SortCriterion.OLDEST:
            return sorted(demos, key=lambda d: d.created_at)
        case SortCriterion.DURATION:
            return sorted(
                demos,
                key=lambda d: (d.duration is None, -(d.duration or 0.0)),
            )
        case _:
            assert_never(criterion)


class HistoryListController:
    """
    Holds one page of history at a time.

    Attributes:
        items: Demos of the loaded page, in server order
        page: Page the items belong to (1 before any load)
        total_pages: Last known page count (1 before any load)
        sort_by: Ordering applied by visible_items
        error: Last error from load_page() or delete(), cleared on success

    Example:
        history = HistoryListController(api)
        await history.load_page(1)
        for demo in history.sort(SortCriterion.DURATION):
            print(demo.prompt, demo.duration)
        await history.delete(demo_id)
    """

    def __init__(self, api: HistorySource, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.api = api
        self.page_size = page_size

        self.items: list[Demo] = []
        self.page = 1
        self.total_pages = 1
        self.sort_by = SortCriterion.RECENT
        self.error: DemoClientError | None = None
        self.loaded = False

    @property
    def visible_items(self) -> list[Demo]:
        """The loaded page ordered by sort_by."""
        return sort_demos(self.items, self.sort_by)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def clamp_page(self, page: int) -> int:
        return max(1, min(page, self.total_pages))

    async def load_page(self, page: int) -> HistoryPage:
        """
        Fetch a page, clamped into [1, total_pages].

        Raises:
            DemoClientError: The fetch failed; items and total_pages are
                left as they were.
        """
        target = self.clamp_page(page)
        if target != page:
            logger.debug("Requested history page %d clamped to %d", page, target)

        try:
            result = await self.api.get_history(target, self.page_size)
        except DemoClientError as e:
            logger.warning("Loading history page %d failed: %s", target, e)
            self.error = e
            raise

        self.items = list(result.items)
        self.total_pages = result.total_pages
        self.page = target
        self.error = None
        self.loaded = True
        return result

    async def next_page(self) -> HistoryPage:
        return await self.load_page(self.page + 1)

    async def previous_page(self) -> HistoryPage:
        return await self.load_page(self.page - 1)

    async def reload(self) -> HistoryPage:
        return await self.load_page(self.page)

    def sort(self, criterion: SortCriterion | str) -> list[Demo]:
        """
        Change the ordering of the loaded page.

        items is untouched and nothing is fetched.

        Returns:
            The page in the new order.
        """
        self.sort_by = SortCriterion(criterion)
        return self.visible_items

    async def delete(self, demo_id: DemoId) -> None:
        """
        Delete a demo, then drop it from the loaded page.

        Raises:
            DemoClientError: The server did not acknowledge; items unchanged.
        """
        try:
            await self.api.delete_demo(demo_id)
        except DemoClientError as e:
            logger.warning("Deleting demo %s failed: %s", demo_id, e)
            self.error = e
            raise

        self.items = [d for d in self.items if d.id != demo_id]
        self.error = None
        logger.info("Deleted demo %s", demo_id)
