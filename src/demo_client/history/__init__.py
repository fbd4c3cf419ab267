"""Demo history browsing."""

from demo_client.history.controller import (
    HistoryListController,
    HistorySource,
    SortCriterion,
    sort_demos,
)

__all__ = ["HistoryListController", "HistorySource", "SortCriterion", "sort_demos"]
