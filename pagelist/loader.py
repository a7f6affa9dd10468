"""
Incremental paginated list loader.

This module provides PaginatedListLoader, the state machine behind an
"infinite scroll" listing: one initial load per session, then append-on-demand
pages until the data source's total is reached.
"""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar

from ._logging import logger, redact_key
from .config import LoaderOptions
from .exceptions import FetchError, LoaderConfigError, MissingFilterKeyError, handle_fetch_errors
from .pagination import FetchFailure, FetchResult, FetchSuccess, LoaderSnapshot, LoaderState, Page
from .serializer import PageSerializer

T = TypeVar("T")

Listener = Callable[[LoaderSnapshot[Any]], None]

# Sentinel distinguishing "no filter_key argument" from "filter_key=None"
_MISSING: Any = object()


class PaginatedListLoader(Generic[T]):
    """
    Loads a listing page by page from a fetch capability.

    The same component backs unfiltered listings and listings filtered by a key
    (e.g. a category slug); the only difference is whether the key is forwarded
    to the data source.

    Configuration can be declared on a subclass:

        class CategoryProducts(PaginatedListLoader[Product]):
            class Meta:
                page_size = 20
                requires_filter = True
                items_field = "products"

    Usage:
        loader = CategoryProducts(api.fetch_by_category, filter_key="laptops")
        await loader.load_initial()
        await loader.load_more()  # called on every scroll-proximity signal
        loader.state().items
    """

    _meta: ClassVar[LoaderOptions] = LoaderOptions()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # cls._meta still resolves to the parent's options at this point
        cls._meta = LoaderOptions.from_meta(cls.__dict__.get("Meta"), base=cls._meta)

    def __init__(
        self,
        fetch_page: Callable[..., Any],
        page_size: int | None = None,
        *,
        filter_key: Any = _MISSING,
        item_type: type[T] | None = None,
        options: LoaderOptions | None = None,
        name: str | None = None,
    ) -> None:
        """
        Args:
            fetch_page: Callable invoked as fetch_page(skip=..., limit=...), plus
                filter_key=... for filtered loaders. May be sync or async and may
                return a Page or a raw payload mapping.
            page_size: Items requested per fetch (overrides Meta/options)
            filter_key: Key forwarded to the data source. Passing it, even as
                None, makes this a filtered loader.
            item_type: Optional Pydantic model (or any type) each item is validated into
            options: Base options; defaults to the class's Meta-derived options
            name: Label used in log records (defaults to the class name)

        Raises:
            LoaderConfigError: If the resulting options are invalid
        """
        if not callable(fetch_page):
            raise LoaderConfigError("fetch_page must be callable", option="fetch_page")

        base = options if options is not None else self._meta
        requires_filter = True if filter_key is not _MISSING else None
        self.options = base.merged(page_size=page_size, name=name, requires_filter=requires_filter)
        self.name = self.options.name or type(self).__name__

        self._fetch_page = fetch_page
        self._filter_key = None if filter_key is _MISSING else filter_key
        self._serializer: PageSerializer[T] = PageSerializer(
            items_field=self.options.items_field,
            total_field=self.options.total_field,
            item_type=item_type,
        )

        self._generation = 0
        self._state: LoaderState[T] = LoaderState(page_size=self.options.page_size)
        self._listeners: list[Listener] = []
        self._closed = False

    # --- READ-ONLY SURFACE ---

    def state(self) -> LoaderSnapshot[T]:
        """Returns an immutable snapshot of the current session."""
        return self._state.snapshot()

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._state.items)

    @property
    def total(self) -> int:
        return self._state.total

    @property
    def has_more(self) -> bool:
        return self._state.has_more

    @property
    def is_initial_loading(self) -> bool:
        return self._state.is_initial_loading

    @property
    def is_loading_more(self) -> bool:
        return self._state.is_loading_more

    @property
    def last_error(self) -> Exception | None:
        return self._state.last_error

    @property
    def page_size(self) -> int:
        return self.options.page_size

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def filter_key(self) -> Any:
        return self._filter_key

    @property
    def is_filtered(self) -> bool:
        return self.options.requires_filter

    @property
    def closed(self) -> bool:
        return self._closed

    # --- OPERATIONS ---

    async def load_initial(self) -> FetchResult[T] | None:
        """
        Starts a new session and fetches its first page.

        The previous session's items are cleared before the fetch is issued, and any
        response still in flight for an older session is discarded when it arrives.
        Fetch failures are swallowed: the session ends up empty with `last_error` set.

        Returns:
            The FetchResult of the first page, or None if no fetch was issued
            (closed loader, or filtered loader without a filter key).
        """
        if self._closed:
            logger.debug("Ignoring load on closed loader", extra=self._log_context("load_initial"))
            return None

        self._generation += 1
        generation = self._generation
        self._state = LoaderState(
            page_size=self.options.page_size, generation=generation, is_initial_loading=True
        )
        self._notify()

        if not self._filter_key_present():
            logger.info(
                "Skipping initial load: no filter key", extra=self._log_context("load_initial")
            )
            self._state.is_initial_loading = False
            self._state.last_error = MissingFilterKeyError(self.name)
            self._notify()
            return None

        logger.info(
            "Loading first page",
            extra=self._log_context("load_initial", skip=0, limit=self.options.page_size),
        )

        try:
            result = await self._fetch(skip=0, generation=generation)
        except asyncio.CancelledError:
            if self._is_current(generation):
                self._state.is_initial_loading = False
                self._notify()
            raise

        if result.stale:
            self._log_stale("load_initial", generation)
            return result

        state = self._state
        if isinstance(result, FetchSuccess):
            page = result.page
            state.items = list(page.items)
            state.total = page.resolved_total(len(state.items))
            state.last_error = None
            logger.info(
                "First page loaded",
                extra=self._log_context("load_initial", count=page.count, total=state.total),
            )
        else:
            state.items = []
            state.last_error = result.error
            self._log_failure("load_initial", result.error)

        state.is_initial_loading = False
        self._notify()
        return result

    async def load_more(self) -> FetchResult[T] | None:
        """
        Fetches the next page if the session is eligible for one.

        Silently does nothing while another fetch is in flight, once the known
        total has been reached, before the first load_initial(), for a filtered
        loader without a key, or after close(). A failed fetch leaves items and
        total untouched so a later call retries the same page.

        Returns:
            The FetchResult of the page, or None if the call was gated.
        """
        state = self._state
        reason = self._gate_reason(state)
        if reason is not None:
            logger.debug(
                "Skipping load_more",
                extra=self._log_context("load_more", reason=reason, count=len(state.items)),
            )
            return None

        generation = state.generation
        skip = len(state.items)
        # Flag is set before the first await so the gate cannot be passed twice
        state.is_loading_more = True
        self._notify()

        logger.info(
            "Loading next page",
            extra=self._log_context("load_more", skip=skip, limit=self.options.page_size),
        )

        try:
            result = await self._fetch(skip=skip, generation=generation)
        except asyncio.CancelledError:
            if self._is_current(generation):
                self._state.is_loading_more = False
                self._notify()
            raise

        if result.stale:
            self._log_stale("load_more", generation)
            return result

        state = self._state
        if isinstance(result, FetchSuccess):
            page = result.page
            state.items.extend(page.items)
            if page.total is not None:
                state.total = page.total
            state.last_error = None
            logger.info(
                "Next page loaded",
                extra=self._log_context(
                    "load_more", count=page.count, loaded=len(state.items), total=state.total
                ),
            )
        else:
            state.last_error = result.error
            self._log_failure("load_more", result.error)

        state.is_loading_more = False
        self._notify()
        return result

    async def change_filter(self, filter_key: Any) -> FetchResult[T] | None:
        """
        Switches a filtered loader to another key and starts a new session.

        Does nothing when the key is unchanged and a session has already started.

        Raises:
            LoaderConfigError: If the loader is not a filtered loader
        """
        if not self.options.requires_filter:
            raise LoaderConfigError(
                f"Loader '{self.name}' is not filtered; it cannot change filter key",
                option="filter_key",
            )
        if filter_key == self._filter_key and self._generation > 0:
            logger.debug("Filter key unchanged", extra=self._log_context("change_filter"))
            return None

        self._filter_key = filter_key
        return await self.load_initial()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Registers a callback receiving a LoaderSnapshot after every state change.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """
        Tears the loader down with its view.
        Pending responses are discarded and later loads become no-ops.
        """
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._state = LoaderState(page_size=self.options.page_size, generation=self._generation)
        self._listeners.clear()
        logger.debug("Loader closed", extra=self._log_context("close"))

    # --- INTERNALS ---

    def _filter_key_present(self) -> bool:
        if not self.options.requires_filter:
            return True
        return self._filter_key is not None and self._filter_key != ""

    def _gate_reason(self, state: LoaderState[T]) -> str | None:
        """Returns why load_more() must not fetch, or None if it may."""
        if self._closed:
            return "closed"
        if state.generation == 0:
            return "not_started"
        if state.is_loading:
            return "in_flight"
        if not self._filter_key_present():
            return "no_filter_key"
        if not state.has_more:
            return "exhausted"
        return None

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._state.generation

    async def _fetch(self, skip: int, generation: int) -> FetchResult[T]:
        """Runs one fetch and wraps its outcome, tagged with the issuing generation."""
        limit = self.options.page_size
        try:
            with handle_fetch_errors(skip=skip, limit=limit):
                page = await self._call_source(skip, limit)
        except FetchError as e:
            stale = not self._is_current(generation)
            return FetchFailure(error=e, generation=generation, stale=stale)

        stale = not self._is_current(generation)
        return FetchSuccess(page=page, generation=generation, stale=stale)

    async def _call_source(self, skip: int, limit: int) -> Page[T]:
        kwargs: dict[str, Any] = {"skip": skip, "limit": limit}
        if self.options.requires_filter:
            kwargs["filter_key"] = self._filter_key

        response = self._fetch_page(**kwargs)
        if inspect.isawaitable(response):
            response = await response
        return self._serializer.from_payload(response)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self._state.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(
                    "Loader listener failed",
                    extra=self._log_context("notify", listener=repr(listener)),
                )

    def _log_failure(self, operation: str, error: FetchError) -> None:
        logger.warning(
            "Fetch failed",
            extra=self._log_context(
                operation,
                skip=error.skip,
                limit=error.limit,
                error=error.message,
                error_type=type(error.original_error or error).__name__,
            ),
        )

    def _log_stale(self, operation: str, generation: int) -> None:
        logger.debug(
            "Discarding stale response",
            extra=self._log_context(operation, stale_generation=generation),
        )

    def _log_context(self, operation: str, **extra: Any) -> dict[str, Any]:
        context = {
            "loader": self.name,
            "operation": operation,
            "generation": self._generation,
            "filter_hash": redact_key(self._filter_key),
        }
        context.update(extra)
        return context
