"""
Unit tests for PageSerializer.

Tests the conversion of raw data-source payloads into Page objects and back.
"""

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from pagelist.exceptions import PageValidationError
from pagelist.pagination import Page
from pagelist.serializer import PageSerializer
from tests.helpers.sources import Product, make_products


class TestFromPayload:
    """Test PageSerializer.from_payload()."""

    def test_default_fields(self):
        serializer = PageSerializer()

        page = serializer.from_payload({"items": [{"id": 1}, {"id": 2}], "total": 10})

        assert page == Page(items=[{"id": 1}, {"id": 2}], total=10)

    def test_custom_items_field(self):
        """Test the product API shape: products + total + echo of skip/limit."""
        serializer = PageSerializer(items_field="products")

        page = serializer.from_payload(
            {"products": [{"id": 1}], "total": 45, "skip": 0, "limit": 20}
        )

        assert page.items == [{"id": 1}]
        assert page.total == 45

    def test_missing_total_is_none(self):
        page = PageSerializer().from_payload({"items": [1, 2]})
        assert page.total is None

    def test_null_total_is_none(self):
        page = PageSerializer().from_payload({"items": [1, 2], "total": None})
        assert page.total is None

    def test_numeric_string_total_is_coerced(self):
        page = PageSerializer().from_payload({"items": [], "total": "45"})
        assert page.total == 45

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            PageSerializer().from_payload({"items": [], "total": -3})

    def test_non_list_items_rejected(self):
        with pytest.raises(ValidationError):
            PageSerializer().from_payload({"items": "oops", "total": 1})

    def test_missing_items_field_rejected(self):
        serializer = PageSerializer(items_field="products")

        with pytest.raises(PageValidationError) as exc_info:
            serializer.from_payload({"items": [], "total": 0})

        assert exc_info.value.field == "products"

    def test_attribute_payload(self):
        """Test an object exposing the fields as attributes (e.g. an SDK response)."""
        response = SimpleNamespace(products=[{"id": 7}], total=1)

        page = PageSerializer(items_field="products").from_payload(response)

        assert page.items == [{"id": 7}]
        assert page.total == 1

    def test_unsupported_payload_rejected(self):
        with pytest.raises(PageValidationError, match="Unsupported page payload type: int"):
            PageSerializer().from_payload(42)

    def test_page_passes_through(self):
        page = Page(items=[1, 2], total=2)
        assert PageSerializer().from_payload(page) is page

    def test_items_validated_into_item_type(self):
        serializer = PageSerializer(items_field="products", item_type=Product)

        page = serializer.from_payload(
            {"products": [{"id": 1, "title": "Laptop", "price": "999.5"}], "total": 1}
        )

        assert isinstance(page.items[0], Product)
        assert page.items[0].price == 999.5

    def test_invalid_item_rejected(self):
        serializer = PageSerializer(item_type=Product)

        with pytest.raises(ValidationError):
            serializer.from_payload({"items": [{"id": "not-an-int", "title": "x", "price": 1}]})

    def test_page_items_revalidated_with_item_type(self):
        serializer = PageSerializer(item_type=Product)

        page = serializer.from_payload(Page(items=[{"id": 1, "title": "x", "price": 1}], total=1))

        assert isinstance(page.items[0], Product)
        assert page.total == 1


class TestToPayload:
    """Test PageSerializer.to_payload()."""

    def test_models_are_dumped(self):
        serializer = PageSerializer(items_field="products")
        products = make_products(2)

        payload = serializer.to_payload(Page(items=products, total=45))

        assert payload["total"] == 45
        assert payload["products"][0]["id"] == 1
        assert payload["products"][1]["title"] == "Product 2"

    def test_total_omitted_when_unknown(self):
        payload = PageSerializer().to_payload(Page(items=[{"id": 1}]))
        assert payload == {"items": [{"id": 1}]}

    def test_payload_is_accepted_back(self):
        serializer = PageSerializer(items_field="products", item_type=Product)
        original = Page(items=make_products(3), total=3)

        assert serializer.from_payload(serializer.to_payload(original)) == original
