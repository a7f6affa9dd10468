"""
Shared pytest fixtures and configuration for pagelist tests.

This module provides the fake data sources used across unit and integration
tests, plus ready-made loaders for the home and category listings.
"""

import pytest

from pagelist import PaginatedListLoader
from tests.helpers.listings import CategoryProducts, HomeProducts
from tests.helpers.sources import DeferredSource, InMemoryCatalog, Product, make_products


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests with fake data sources")
    config.addinivalue_line("markers", "integration: End-to-end listing flows")
    config.addinivalue_line("markers", "slow: Slow tests that may take longer")


@pytest.fixture
def catalog() -> InMemoryCatalog:
    """
    Catalog of 45 products: 25 "laptops" followed by 20 "phones".
    """
    return InMemoryCatalog(
        make_products(25, category="laptops") + make_products(20, category="phones", start_id=26)
    )


@pytest.fixture
def home_loader(catalog: InMemoryCatalog) -> HomeProducts:
    """Unfiltered loader over the 45-product catalog."""
    return HomeProducts(catalog.fetch, item_type=Product)


@pytest.fixture
def category_loader(catalog: InMemoryCatalog) -> CategoryProducts:
    """Category loader starting on "laptops"."""
    return CategoryProducts(catalog.fetch_by_category, filter_key="laptops", item_type=Product)


@pytest.fixture
def deferred_source() -> DeferredSource:
    return DeferredSource()


@pytest.fixture
def deferred_loader(deferred_source: DeferredSource) -> PaginatedListLoader[dict]:
    """Loader over a source whose responses the test releases by hand (page_size=2)."""
    return PaginatedListLoader(deferred_source.fetch, page_size=2, name="deferred")
