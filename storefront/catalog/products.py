"""
Catalogue en mémoire: savons au lait de chèvre vendus à l'unité.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float
    qty_available: int
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


PRODUCTS: List[Product] = [
    Product(
        id="lemon-bar",
        name="Lemon Bar",
        price=8.25,
        qty_available=10,
        description="Goat's milk bar with shea and cocoa butter, bright lemon fragrance and bentonite clay.",
    ),
    Product(
        id="whiskey-barrel",
        name="Whiskey Barrel",
        price=8.25,
        qty_available=8,
        description="Goat's milk bar with notes of oak barrel, vanilla and spice.",
    ),
    Product(
        id="tabac-leather",
        name="Tabac & Leather",
        price=8.25,
        qty_available=6,
        description="Rich tobacco and soft leather notes on a creamy goat's milk base.",
    ),
    Product(
        id="sunflower-sandalwood",
        name="Sunflower Sandalwood",
        price=8.25,
        qty_available=12,
        description="Warm woody sandalwood brightened with soft sunflower notes.",
    ),
    Product(
        id="christmas-wreath",
        name="Christmas Wreath",
        price=8.25,
        qty_available=5,
        description="Holiday blend of pine, winter greens and a hint of spice.",
    ),
    Product(
        id="vanilla-buttercream",
        name="Vanilla Buttercream",
        price=8.25,
        qty_available=9,
        description="Cocoa and shea butters with a warm vanilla buttercream fragrance.",
    ),
]


def list_products() -> List[Product]:
    return list(PRODUCTS)


def get_product(product_id: str) -> Optional[Product]:
    if not product_id:
        return None
    return next((p for p in PRODUCTS if p.id == product_id), None)
