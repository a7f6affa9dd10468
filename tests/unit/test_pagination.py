"""
Unit tests for pagination data structures.

Tests Page, LoaderState (derived has_more and snapshots) and the FetchResult types.
"""

import pytest

from pagelist.exceptions import FetchError
from pagelist.pagination import FetchFailure, FetchSuccess, LoaderState, Page


class TestPage:
    """Test the Page dataclass."""

    def test_page_count_matches_items_length(self):
        """Test that count reflects the number of items."""
        page = Page(items=[{"id": 1}, {"id": 2}, {"id": 3}], total=10)
        assert page.count == 3

    def test_page_total_defaults_to_none(self):
        """Test that total is optional."""
        page = Page(items=[{"id": 1}])
        assert page.total is None

    def test_resolved_total_uses_reported_total(self):
        page = Page(items=[1, 2], total=45)
        assert page.resolved_total(default=2) == 45

    def test_resolved_total_falls_back_to_default(self):
        page = Page(items=[1, 2])
        assert page.resolved_total(default=2) == 2

    def test_resolved_total_keeps_zero(self):
        """Test that an explicit zero is not replaced by the default."""
        page = Page(items=[], total=0)
        assert page.resolved_total(default=7) == 0

    def test_negative_total_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            Page(items=[], total=-1)


class TestLoaderState:
    """Test LoaderState derived values."""

    def test_fresh_state(self):
        state = LoaderState(page_size=20)

        assert state.items == []
        assert state.total == 0
        assert state.generation == 0
        assert state.is_loading is False
        assert state.last_error is None

    def test_has_more_when_total_unknown(self):
        """Test that total == 0 means "keep going"."""
        state = LoaderState(page_size=20, items=[1, 2], total=0)
        assert state.has_more is True

    def test_has_more_while_below_total(self):
        state = LoaderState(page_size=20, items=list(range(20)), total=45)
        assert state.has_more is True

    def test_no_more_once_total_reached(self):
        state = LoaderState(page_size=20, items=list(range(45)), total=45)
        assert state.has_more is False

    def test_no_more_when_items_exceed_total(self):
        """Test that a shrinking upstream total still terminates."""
        state = LoaderState(page_size=20, items=list(range(40)), total=30)
        assert state.has_more is False

    def test_is_loading_covers_both_flags(self):
        assert LoaderState(page_size=1, is_initial_loading=True).is_loading is True
        assert LoaderState(page_size=1, is_loading_more=True).is_loading is True

    def test_snapshot_copies_items(self):
        """Test that later mutation does not leak into a snapshot."""
        state = LoaderState(page_size=2, generation=3, items=[1, 2], total=5)
        snapshot = state.snapshot()
        state.items.append(3)

        assert snapshot.items == (1, 2)
        assert snapshot.total == 5
        assert snapshot.generation == 3
        assert snapshot.has_more is True

    def test_snapshot_is_empty(self):
        assert LoaderState(page_size=2).snapshot().is_empty is True
        assert LoaderState(page_size=2, is_initial_loading=True).snapshot().is_empty is False
        assert LoaderState(page_size=2, items=[1]).snapshot().is_empty is False


class TestFetchResult:
    """Test the FetchSuccess / FetchFailure pair."""

    def test_success_is_ok(self):
        result = FetchSuccess(page=Page(items=[1]), generation=1)
        assert result.ok is True
        assert result.stale is False

    def test_failure_is_not_ok(self):
        error = FetchError("boom", skip=0, limit=20)
        result = FetchFailure(error=error, generation=2, stale=True)

        assert result.ok is False
        assert result.error is error
        assert result.stale is True
