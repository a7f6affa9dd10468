"""
FastAPI Integration Example

Serves the paginated product API that a pagelist loader consumes
(GET /products?skip=&limit= and GET /products/category/{slug}?skip=&limit=),
using PageSerializer to produce the {"products": [...], "total": N} wire shape.
"""

from fastapi import FastAPI, HTTPException, Query, status
from pydantic import BaseModel

from pagelist import Page, PageSerializer


class Product(BaseModel):
    """Product model - shared by the API and the loader's item validation"""

    id: int
    title: str
    price: float
    category: str
    images: list[str] = []


PRODUCTS = [
    Product(
        id=i,
        title=f"Product {i}",
        price=round(4.5 * i, 2),
        category=["laptops", "smartphones"][i % 2],
        images=[f"https://cdn.example.com/products/{i}/1.jpg"],
    )
    for i in range(1, 46)
]

serializer: PageSerializer[Product] = PageSerializer(items_field="products", item_type=Product)

app = FastAPI(title="pagelist + FastAPI Example")


def page_of(products: list[Product], skip: int, limit: int) -> dict:
    page = Page(items=products[skip : skip + limit], total=len(products))
    return {**serializer.to_payload(page), "skip": skip, "limit": limit}


@app.get("/products")
def list_products(skip: int = Query(0, ge=0), limit: int = Query(20, gt=0, le=100)) -> dict:
    """One page of the unfiltered listing"""
    return page_of(PRODUCTS, skip, limit)


@app.get("/products/category/{slug}")
def list_category(
    slug: str, skip: int = Query(0, ge=0), limit: int = Query(20, gt=0, le=100)
) -> dict:
    """One page of a category listing"""
    matching = [p for p in PRODUCTS if p.category == slug]
    if not matching:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Category '{slug}' not found"
        )
    return page_of(matching, skip, limit)


# Run with: uvicorn main:app --reload
# Visit: http://localhost:8000/docs
