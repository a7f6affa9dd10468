from .config import LoaderOptions
from .exceptions import (
    FetchError,
    LoaderConfigError,
    MissingFilterKeyError,
    PagelistError,
    PageValidationError,
)
from .loader import PaginatedListLoader
from .pagination import FetchFailure, FetchResult, FetchSuccess, LoaderSnapshot, LoaderState, Page
from .scroll import EndReachedTrigger, distance_from_end, is_near_end
from .serializer import PageSerializer

__all__ = [
    "PaginatedListLoader",
    "LoaderOptions",
    # Pagination types
    "Page",
    "LoaderState",
    "LoaderSnapshot",
    "FetchResult",
    "FetchSuccess",
    "FetchFailure",
    "PageSerializer",
    # Scroll trigger
    "EndReachedTrigger",
    "distance_from_end",
    "is_near_end",
    # Exceptions
    "PagelistError",
    "FetchError",
    "PageValidationError",
    "MissingFilterKeyError",
    "LoaderConfigError",
]
