from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

app = FastAPI(title="Catalog Service (Mock)")


class Product(BaseModel):
    id: int
    title: str
    price: float
    image: str


class Stock(BaseModel):
    id: int
    amount: int


IMAGE_BASE = "https://rocketseat-cdn.s3-sa-east-1.amazonaws.com/modulo-redux"

# Mock product database
PRODUCTS = {
    1: Product(
        id=1,
        title="Lightweight Comfortable Walking Sneaker",
        price=179.9,
        image=f"{IMAGE_BASE}/tenis1.jpg"
    ),
    2: Product(
        id=2,
        title="Lightweight Comfortable Walking Sneaker",
        price=139.9,
        image=f"{IMAGE_BASE}/tenis2.jpg"
    ),
    3: Product(
        id=3,
        title="VR Walking Sneaker",
        price=219.9,
        image=f"{IMAGE_BASE}/tenis3.jpg"
    ),
    4: Product(
        id=4,
        title="Lightweight Comfortable Walking Sneaker",
        price=139.9,
        image=f"{IMAGE_BASE}/tenis1.jpg"
    ),
    5: Product(
        id=5,
        title="Lightweight Comfortable Walking Sneaker",
        price=139.9,
        image=f"{IMAGE_BASE}/tenis2.jpg"
    ),
    6: Product(
        id=6,
        title="VR Walking Sneaker",
        price=219.9,
        image=f"{IMAGE_BASE}/tenis3.jpg"
    ),
}

STOCK = {
    1: Stock(id=1, amount=3),
    2: Stock(id=2, amount=5),
    3: Stock(id=3, amount=2),
    4: Stock(id=4, amount=1),
    5: Stock(id=5, amount=5),
    6: Stock(id=6, amount=10),
}


@app.get("/products/{product_id}")
async def get_product(product_id: int):
    """Get product by ID"""
    product = PRODUCTS.get(product_id)

    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

    return product.model_dump()


@app.get("/products")
async def list_products():
    """List all products"""
    return [p.model_dump() for p in PRODUCTS.values()]


@app.get("/stock/{product_id}")
async def get_stock(product_id: int):
    """Get available stock for a product"""
    stock = STOCK.get(product_id)

    if stock is None:
        raise HTTPException(status_code=404, detail=f"Stock for product {product_id} not found")

    return stock.model_dump()


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    from rocketcart.bootstrap import configure_logging

    configure_logging()
    uvicorn.run(
        "rocketcart.catalog_mock:app",
        host="0.0.0.0",
        port=3333,
        reload=True,
    )
