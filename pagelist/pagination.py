"""
Pagination data structures for pagelist.

This module provides the page returned by a data source, the mutable per-session
state owned by a loader, the read-only snapshot handed to the presentation layer,
and the explicit result type of a single fetch.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

from .exceptions import FetchError, PagelistError

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """
    Represents a single page of results returned by a data source.

    Attributes:
        items: Items of this page, in source order (may be empty)
        total: Size of the full result set as known by the data source,
            or None when the source did not report it
    """

    items: list[T]
    total: int | None = None

    def __post_init__(self) -> None:
        if self.total is not None and self.total < 0:
            raise ValueError(f"Page total must be non-negative, got {self.total}")

    @property
    def count(self) -> int:
        """Number of items in this page."""
        return len(self.items)

    def resolved_total(self, default: int) -> int:
        """Returns the reported total, or `default` when the source omitted it."""
        return self.total if self.total is not None else default


@dataclass
class LoaderState(Generic[T]):
    """
    Mutable state of one loading session.

    A fresh instance is created by every initial load; the `generation`
    identifies the session so late responses from an older one can be dropped.
    `total == 0` means "not known yet" and also "known to be empty".
    """

    page_size: int
    generation: int = 0
    items: list[T] = field(default_factory=list)
    is_initial_loading: bool = False
    is_loading_more: bool = False
    total: int = 0
    last_error: PagelistError | None = None

    @property
    def is_loading(self) -> bool:
        return self.is_initial_loading or self.is_loading_more

    @property
    def has_more(self) -> bool:
        """True while the loader does not believe the result set is exhausted."""
        return len(self.items) < self.total or self.total == 0

    def snapshot(self) -> "LoaderSnapshot[T]":
        return LoaderSnapshot(
            items=tuple(self.items),
            is_initial_loading=self.is_initial_loading,
            is_loading_more=self.is_loading_more,
            has_more=self.has_more,
            total=self.total,
            last_error=self.last_error,
            generation=self.generation,
        )


@dataclass(frozen=True)
class LoaderSnapshot(Generic[T]):
    """Read-only view of a loader's state, as consumed by the presentation layer."""

    items: tuple[T, ...]
    is_initial_loading: bool
    is_loading_more: bool
    has_more: bool
    total: int
    last_error: PagelistError | None
    generation: int

    @property
    def is_empty(self) -> bool:
        """True when nothing is loading and there is nothing to show."""
        return not self.items and not self.is_initial_loading and not self.is_loading_more


@dataclass(frozen=True)
class FetchSuccess(Generic[T]):
    page: Page[T]
    generation: int
    stale: bool = False

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FetchFailure:
    error: FetchError
    generation: int
    stale: bool = False

    @property
    def ok(self) -> bool:
        return False


FetchResult = Union[FetchSuccess[T], FetchFailure]
