from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from storefront.catalog import products as catalog

router = APIRouter(prefix="/products", tags=["Catalog"])

@router.get("")
def list_products():
    """Catalogue public pour hydrater la page boutique."""
    return JSONResponse({"products": [p.to_dict() for p in catalog.list_products()]})

@router.get("/{product_id}")
def get_product(product_id: str):
    """Produit par identifiant; 404 si inconnu."""
    product = catalog.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return JSONResponse(product.to_dict())
