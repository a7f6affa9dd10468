from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError as PydanticValidationError


class PagelistError(Exception):
    """Base exception for all pagelist errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class FetchError(PagelistError):
    """Raised when the data source fails to produce a page."""

    def __init__(
        self,
        message: str = "Failed to fetch page",
        skip: int | None = None,
        limit: int | None = None,
        transport: bool = False,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.skip = skip
        self.limit = limit
        self.transport = transport


class PageValidationError(FetchError):
    """Raised when the data source returns a payload that is not a valid page."""

    def __init__(
        self,
        message: str,
        skip: int | None = None,
        limit: int | None = None,
        field: str | None = None,
        value: Any | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, skip=skip, limit=limit, original_error=original_error)
        self.field = field
        self.value = value


class MissingFilterKeyError(PagelistError):
    """Recorded when a filtered loader is asked to load without a filter key."""

    def __init__(self, loader_name: str) -> None:
        super().__init__(f"Loader '{loader_name}' requires a filter key but none was set")
        self.loader_name = loader_name


class LoaderConfigError(PagelistError):
    """Raised for invalid loader configuration."""

    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option


@contextmanager
def handle_fetch_errors(
    skip: int | None = None, limit: int | None = None
) -> Generator[None, None, None]:
    """
    Context manager that catches whatever the data source raises
    and re-raises it as a FetchError (or subclass).

    Args:
        skip: Offset of the page being fetched, for better error messages
        limit: Page size being fetched

    Usage:
        with handle_fetch_errors(skip=40, limit=20):
            page = await fetch_page(skip=40, limit=20)
    """
    try:
        yield
    except FetchError as e:
        # Already translated; fill in the request window if the source left it out
        if e.skip is None:
            e.skip = skip
        if e.limit is None:
            e.limit = limit
        raise
    except PydanticValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {}
        loc = ".".join(str(part) for part in first.get("loc", ()))
        raise PageValidationError(
            message=f"Invalid page payload (skip={skip}, limit={limit}): {first.get('msg', e)}",
            skip=skip,
            limit=limit,
            field=loc or None,
            value=first.get("input"),
            original_error=e,
        ) from e
    except (TimeoutError, OSError) as e:
        raise FetchError(
            message=f"Transport failure fetching page (skip={skip}, limit={limit}): {e!s}",
            skip=skip,
            limit=limit,
            transport=True,
            original_error=e,
        ) from e
    except Exception as e:
        # Unknown error: wrap in generic FetchError
        raise FetchError(
            message=f"Data source error ({type(e).__name__}): {e!s}",
            skip=skip,
            limit=limit,
            original_error=e,
        ) from e
