"""
Tests for HistoryListController.

These tests verify that:
- Requested pages are clamped into [1, total_pages] before fetching
- A failed load leaves the previously loaded page in place
- Sorting reorders the loaded page without refetching
- Deletion only removes an item after the server acknowledges it
"""

import pytest

from demo_client.exceptions import ServerError, TransientError
from demo_client.history import HistoryListController, SortCriterion, sort_demos
from demo_client.types import HistoryPage


class FakeHistoryAPI:
    """In-memory history split into fixed-size pages."""

    def __init__(self, demos, page_size=10):
        self.demos = list(demos)
        self.page_size = page_size
        self.history_calls: list[int] = []
        self.delete_calls: list[str] = []
        self.history_error: Exception | None = None
        self.delete_error: Exception | None = None

    async def get_history(self, page=1, page_size=10):
        self.history_calls.append(page)
        if self.history_error is not None:
            raise self.history_error
        total_pages = max(1, -(-len(self.demos) // page_size))
        start = (page - 1) * page_size
        return HistoryPage(
            items=self.demos[start : start + page_size],
            total_pages=total_pages,
            page=page,
        )

    async def delete_demo(self, demo_id):
        self.delete_calls.append(demo_id)
        if self.delete_error is not None:
            raise self.delete_error
        self.demos = [d for d in self.demos if d.id != demo_id]


@pytest.fixture
def demos(make_demo):
    return [make_demo(id=f"d-{n}", age_minutes=n) for n in range(1, 36)]


class TestPagination:
    """Tests for load_page() and page clamping."""

    @pytest.mark.asyncio
    async def test_load_first_page(self, demos):
        api = FakeHistoryAPI(demos)
        history = HistoryListController(api, page_size=10)
        result = await history.load_page(1)

        assert result.total_pages == 4
        assert history.total_pages == 4
        assert history.page == 1
        assert [d.id for d in history.items][:2] == ["d-1", "d-2"]
        assert history.loaded
        assert history.has_next
        assert not history.has_previous

    @pytest.mark.asyncio
    async def test_page_past_end_clamped_to_last(self, demos):
        api = FakeHistoryAPI(demos)
        history = HistoryListController(api, page_size=10)
        await history.load_page(1)
        await history.load_page(6)

        assert api.history_calls == [1, 4]
        assert history.page == 4
        assert len(history.items) == 5
        assert not history.has_next

    @pytest.mark.asyncio
    async def test_clamp_before_first_load(self, demos):
        """total_pages is 1 until a page has been loaded."""
        api = FakeHistoryAPI(demos)
        history = HistoryListController(api, page_size=10)
        await history.load_page(3)

        assert api.history_calls == [1]
        assert history.page == 1

    @pytest.mark.asyncio
    async def test_page_below_one_clamped(self, demos):
        api = FakeHistoryAPI(demos)
        history = HistoryListController(api, page_size=10)
        await history.load_page(1)
        await history.load_page(0)
        await history.load_page(-3)

        assert api.history_calls == [1, 1, 1]

    @pytest.mark.asyncio
    async def test_next_and_previous(self, demos):
        api = FakeHistoryAPI(demos)
        history = HistoryListController(api, page_size=10)
        await history.load_page(1)
        await history.next_page()
        await history.next_page()
        await history.previous_page()
        await history.reload()

        assert api.history_calls == [1, 2, 3, 2, 2]
        assert history.page == 2
        assert history.has_previous

    @pytest.mark.asyncio
    async def test_empty_history(self):
        api = FakeHistoryAPI([])
        history = HistoryListController(api)
        await history.load_page(2)

        assert history.items == []
        assert history.page == 1
        assert history.total_pages == 1

    @pytest.mark.asyncio
    async def test_failed_load_keeps_previous_items(self, demos):
        api = FakeHistoryAPI(demos)
        history = HistoryListController(api, page_size=10)
        await history.load_page(1)
        before = list(history.items)

        api.history_error = TransientError("GET", "/history", "timed out")
        with pytest.raises(TransientError):
            await history.load_page(2)

        assert history.items == before
        assert history.page == 1
        assert history.total_pages == 4
        assert isinstance(history.error, TransientError)

        api.history_error = None
        await history.load_page(2)
        assert history.error is None
        assert history.page == 2


class TestSorting:
    """Tests for client-side sorting of the loaded page."""

    def test_recent_and_oldest(self, make_demo):
        demos = [
            make_demo(id="mid", age_minutes=5),
            make_demo(id="new", age_minutes=1),
            make_demo(id="old", age_minutes=9),
        ]

        assert [d.id for d in sort_demos(demos, SortCriterion.RECENT)] == [
            "new",
            "mid",
            "old",
        ]
        assert [d.id for d in sort_demos(demos, SortCriterion.OLDEST)] == [
            "old",
            "mid",
            "new",
        ]

    def test_duration_longest_first_unknown_last(self, make_demo):
        demos = [
            make_demo(id="none-a"),
            make_demo(id="short", duration=30),
            make_demo(id="none-b"),
            make_demo(id="long", duration=300),
            make_demo(id="zero", duration=0),
        ]
        ordered = [d.id for d in sort_demos(demos, SortCriterion.DURATION)]

        assert ordered == ["long", "short", "zero", "none-a", "none-b"]

    def test_sort_does_not_mutate_input(self, make_demo):
        demos = [make_demo(id="a", age_minutes=9), make_demo(id="b", age_minutes=1)]
        sort_demos(demos, SortCriterion.RECENT)

        assert [d.id for d in demos] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_sort_does_not_refetch(self, make_demo):
        api = FakeHistoryAPI(
            [
                make_demo(id="a", duration=10, age_minutes=1),
                make_demo(id="b", duration=90, age_minutes=2),
            ]
        )
        history = HistoryListController(api)
        await history.load_page(1)

        visible = history.sort(SortCriterion.DURATION)
        assert [d.id for d in visible] == ["b", "a"]
        assert [d.id for d in history.items] == ["a", "b"]
        assert api.history_calls == [1]

        assert [d.id for d in history.sort("oldest")] == ["b", "a"]
        assert history.sort_by is SortCriterion.OLDEST
        assert api.history_calls == [1]


class TestDelete:
    """Tests for delete()."""

    @pytest.mark.asyncio
    async def test_delete_removes_after_ack(self, demos):
        api = FakeHistoryAPI(demos)
        history = HistoryListController(api, page_size=10)
        await history.load_page(1)
        await history.delete("d-3")

        assert api.delete_calls == ["d-3"]
        assert "d-3" not in [d.id for d in history.items]
        assert len(history.items) == 9
        assert api.history_calls == [1]

    @pytest.mark.asyncio
    async def test_failed_delete_leaves_list_unchanged(self, demos):
        api = FakeHistoryAPI(demos)
        history = HistoryListController(api, page_size=10)
        await history.load_page(1)
        before = list(history.items)

        api.delete_error = ServerError(500)
        with pytest.raises(ServerError):
            await history.delete("d-3")

        assert history.items == before
        assert isinstance(history.error, ServerError)
