"""
Scroll-proximity trigger for infinite lists.

Presentation layers report scroll metrics; EndReachedTrigger turns them into
load_more() calls once the viewport is close enough to the end of the content.
The loader's own gate decides whether a fetch actually happens.
"""

from typing import TYPE_CHECKING, Any

from ._logging import logger
from .exceptions import LoaderConfigError

if TYPE_CHECKING:
    from .loader import PaginatedListLoader
    from .pagination import FetchResult


def distance_from_end(offset: float, content_length: float, visible_length: float) -> float:
    """
    Distance between the bottom of the viewport and the end of the content.

    Never negative: overscrolling past the end counts as being at the end.
    """
    return max(content_length - visible_length - offset, 0.0)


def is_near_end(
    offset: float, content_length: float, visible_length: float, threshold: float
) -> bool:
    """
    True when the viewport is within `threshold` visible lengths of the end.
    A threshold of 0.4 fires when less than 40% of a screen remains below.
    """
    if visible_length <= 0:
        return False
    return distance_from_end(offset, content_length, visible_length) < threshold * visible_length


class EndReachedTrigger:
    """
    Bridges scroll events to a loader.

    Usage:
        trigger = EndReachedTrigger(loader)
        # in the view's scroll handler
        await trigger.on_scroll(offset=y, content_length=h, visible_length=vh)
    """

    def __init__(self, loader: "PaginatedListLoader[Any]", threshold: float | None = None):
        self.loader = loader
        self.threshold = (
            threshold if threshold is not None else loader.options.end_reached_threshold
        )
        if self.threshold < 0:
            raise LoaderConfigError(
                f"threshold must be >= 0, got {self.threshold}", option="end_reached_threshold"
            )

    async def on_scroll(
        self, offset: float, content_length: float, visible_length: float
    ) -> "FetchResult[Any] | None":
        """
        Handles one scroll event.

        Returns:
            The FetchResult if a page was requested and issued, None otherwise
        """
        if not is_near_end(offset, content_length, visible_length, self.threshold):
            return None

        logger.debug(
            "End of list reached",
            extra={
                "loader": self.loader.name,
                "operation": "end_reached",
                "offset": offset,
                "content_length": content_length,
            },
        )
        return await self.loader.load_more()
