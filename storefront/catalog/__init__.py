"""
Module 'catalog': produits de la boutique (catalogue fixe, pas de persistance).
"""

from .products import Product, PRODUCTS, list_products, get_product

__all__ = ["Product", "PRODUCTS", "list_products", "get_product"]
