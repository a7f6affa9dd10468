"""
Product Listing Example

A home feed and a category screen backed by the same loader, scrolled to the
end against an in-memory product API. Run with: python examples/product_listing.py
"""

import asyncio
import logging
import random
from typing import Any

from pydantic import BaseModel

from pagelist import EndReachedTrigger, LoaderSnapshot, PaginatedListLoader


class Product(BaseModel):
    """Product model - the items are validated into this"""

    id: int
    title: str
    price: float
    category: str
    images: list[str] = []


CATEGORIES = ["laptops", "smartphones", "fragrances"]

CATALOG = [
    {
        "id": i,
        "title": f"{CATEGORIES[i % 3].title()} #{i}",
        "price": round(9.99 * i, 2),
        "category": CATEGORIES[i % 3],
        "images": [f"https://cdn.example.com/products/{i}/1.jpg"],
    }
    for i in range(1, 95)
]


class ProductApi:
    """Stands in for the remote product API; fails now and then like a real network."""

    def __init__(self, failure_rate: float = 0.2, seed: int = 7) -> None:
        self.failure_rate = failure_rate
        self.random = random.Random(seed)

    async def _respond(self, products: list[dict[str, Any]], skip: int, limit: int) -> dict:
        await asyncio.sleep(0.05)
        if self.random.random() < self.failure_rate:
            raise ConnectionError("Network request failed")
        return {
            "products": products[skip : skip + limit],
            "total": len(products),
            "skip": skip,
            "limit": limit,
        }

    async def fetch_products(self, skip: int, limit: int) -> dict:
        return await self._respond(CATALOG, skip, limit)

    async def fetch_by_category(self, skip: int, limit: int, filter_key: str) -> dict:
        matching = [p for p in CATALOG if p["category"] == filter_key]
        return await self._respond(matching, skip, limit)


class HomeProducts(PaginatedListLoader[Product]):
    class Meta:
        page_size = 20
        items_field = "products"


class CategoryProducts(HomeProducts):
    class Meta:
        requires_filter = True


def render(name: str, snapshot: LoaderSnapshot[Product]) -> None:
    if snapshot.is_initial_loading:
        print(f"[{name}] Loading...")
    elif not snapshot.items:
        print(f"[{name}] No products found")
    else:
        footer = " (loading more)" if snapshot.is_loading_more else ""
        last = snapshot.items[-1]
        print(
            f"[{name}] {len(snapshot.items)}/{snapshot.total} products, last: {last.title}{footer}"
        )


async def scroll_until_done(loader: PaginatedListLoader[Product], max_scrolls: int = 20) -> None:
    trigger = EndReachedTrigger(loader)
    for _ in range(max_scrolls):
        if not loader.has_more:
            break
        content_length = len(loader.items) * 260  # two-column grid, 260px rows
        await trigger.on_scroll(
            offset=max(content_length - 700, 0), content_length=content_length, visible_length=700
        )


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    api = ProductApi()

    # Home feed
    home = HomeProducts(api.fetch_products, item_type=Product)
    home.subscribe(lambda s: render("home", s))
    await home.load_initial()
    await scroll_until_done(home)
    print(f"Home feed finished with {len(home.items)} products")

    # Category screen; switching category starts a new session
    category = CategoryProducts(api.fetch_by_category, filter_key="laptops", item_type=Product)
    category.subscribe(lambda s: render("category", s))
    await category.load_initial()
    await scroll_until_done(category)

    await category.change_filter("fragrances")
    await scroll_until_done(category)

    # A category screen opened without a category
    orphan = CategoryProducts(api.fetch_by_category, filter_key=None, item_type=Product)
    await orphan.load_initial()
    print(f"Orphan screen: empty={orphan.state().is_empty}, error={orphan.last_error}")

    home.close()
    category.close()


if __name__ == "__main__":
    asyncio.run(main())
