from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .exceptions import PageValidationError
from .pagination import Page

T = TypeVar("T")


class PagePayload(BaseModel):
    """Shape every raw page payload must have once its keys are normalised."""

    model_config = ConfigDict(extra="ignore")

    items: list[Any]
    total: int | None = Field(default=None, ge=0)


class PageSerializer(Generic[T]):
    """
    Handles the conversion between raw data-source payloads and `Page` objects.

    Architectural Note:
    -------------------
    Data sources rarely speak our vocabulary: a product API answers with
    {"products": [...], "total": 45, "skip": 0, "limit": 20}. This class maps the
    configured field names onto `Page`, validates the total with Pydantic, and
    optionally validates every item into a Pydantic model (e.g. Product).
    """

    def __init__(
        self,
        items_field: str = "items",
        total_field: str = "total",
        item_type: type[T] | None = None,
    ) -> None:
        self.items_field = items_field
        self.total_field = total_field
        self.item_type = item_type
        self._items_adapter: TypeAdapter[list[T]] | None = None
        if item_type is not None:
            self._items_adapter = TypeAdapter(list[item_type])  # type: ignore[valid-type]

    def from_payload(self, payload: Any) -> Page[T]:
        """
        Converts a data-source response into a Page.

        Accepts a ready-made Page (items re-validated if an item type is set), a
        mapping keyed by the configured field names, or any object exposing them
        as attributes.

        Raises:
            pydantic.ValidationError: If the payload is malformed. The loader
                translates this into PageValidationError via handle_fetch_errors.
            PageValidationError: If the payload is of an unsupported type.
        """
        if isinstance(payload, Page):
            if self._items_adapter is None:
                return payload
            items = self._items_adapter.validate_python(payload.items)
            return Page(items=items, total=payload.total)

        raw = self._extract(payload)
        parsed = PagePayload.model_validate(raw)
        items = parsed.items
        if self._items_adapter is not None:
            items = self._items_adapter.validate_python(items)
        return Page(items=list(items), total=parsed.total)

    def to_payload(self, page: Page[T]) -> dict[str, Any]:
        """
        Converts a Page back to the configured wire shape.
        Used by data-source implementations (e.g. an API endpoint) to answer requests.

        Input:  Page(items=[p1, p2], total=45)
        Output: {"products": [{...}, {...}], "total": 45}
        """
        items = [
            item.model_dump(mode="json") if isinstance(item, BaseModel) else item
            for item in page.items
        ]
        payload: dict[str, Any] = {self.items_field: items}
        if page.total is not None:
            payload[self.total_field] = page.total
        return payload

    def _extract(self, payload: Any) -> dict[str, Any]:
        """Pulls the configured fields out of a mapping or an attribute-bearing object."""
        if isinstance(payload, Mapping):
            if self.items_field not in payload:
                raise PageValidationError(
                    f"Page payload is missing the '{self.items_field}' field",
                    field=self.items_field,
                )
            return {"items": payload[self.items_field], "total": payload.get(self.total_field)}

        if hasattr(payload, self.items_field):
            return {
                "items": getattr(payload, self.items_field),
                "total": getattr(payload, self.total_field, None),
            }

        raise PageValidationError(
            f"Unsupported page payload type: {type(payload).__name__}", value=payload
        )
