from dataclasses import dataclass, fields, replace
from typing import Any

from .exceptions import LoaderConfigError

DEFAULT_PAGE_SIZE = 20
DEFAULT_END_REACHED_THRESHOLD = 0.4


@dataclass
class LoaderOptions:
    """
    Internal container for loader configuration.
    Populated from a loader subclass's inner `Meta` class, then overridden
    by constructor arguments.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    requires_filter: bool = False
    items_field: str = "items"
    total_field: str = "total"
    name: str | None = None  # Label used in log records
    end_reached_threshold: float = DEFAULT_END_REACHED_THRESHOLD

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check option values.

        Raises:
            LoaderConfigError: If any option is out of range
        """
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int):
            raise LoaderConfigError(
                f"page_size must be an integer, got {self.page_size!r}", option="page_size"
            )
        if self.page_size <= 0:
            raise LoaderConfigError(
                f"page_size must be positive, got {self.page_size}", option="page_size"
            )
        if self.end_reached_threshold < 0:
            raise LoaderConfigError(
                f"end_reached_threshold must be >= 0, got {self.end_reached_threshold}",
                option="end_reached_threshold",
            )
        if not self.items_field:
            raise LoaderConfigError("items_field must not be empty", option="items_field")
        if not self.total_field:
            raise LoaderConfigError("total_field must not be empty", option="total_field")

    def merged(self, **overrides: Any) -> "LoaderOptions":
        """
        Returns a copy with the given non-None overrides applied.

        Args:
            **overrides: Option names and values; None values are ignored

        Returns:
            A new, validated LoaderOptions
        """
        known = option_names()
        for key in overrides:
            if key not in known:
                raise LoaderConfigError(f"Unknown loader option '{key}'", option=key)
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    @classmethod
    def from_meta(
        cls, meta_cls: type | None, base: "LoaderOptions | None" = None
    ) -> "LoaderOptions":
        """
        Builds options from an inner `Meta` class, inheriting unspecified values from `base`.

        Args:
            meta_cls: The `Meta` class declared on a loader subclass (or None)
            base: Options inherited from the parent loader class

        Raises:
            LoaderConfigError: If Meta declares an attribute that is not an option
        """
        options = base if base is not None else cls()
        if meta_cls is None:
            return replace(options)

        declared = {k: v for k, v in vars(meta_cls).items() if not k.startswith("_")}
        return options.merged(**declared)


def option_names() -> frozenset[str]:
    return frozenset(f.name for f in fields(LoaderOptions))
