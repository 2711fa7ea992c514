"""
Logique panier pure (pas de Stripe, pas d'I/O).
- validate_items: contrôle du payload {"items": [...]} reçu du front
- to_line_items: conversion en lignes Stripe (montants en centimes)
- Cart: panier côté client (valeur de session, jamais stockée par le serveur)
"""
import math
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from storefront.errors import InvalidCartError, SoldOutError
from .models import CartItem, LineItem

# module storefront.payments.cart
def to_minor_units(price: float) -> int:
    """Prix en dollars -> centimes, arrondi à l'entier le plus proche (demi vers le haut)."""
    return int(math.floor(price * 100 + 0.5))

def aggregate_items(items: Iterable[CartItem]) -> List[CartItem]:
    """
    Fusionne les entrées de même id (quantités additionnées, nom/prix de la première occurrence).
    - Conserve l'ordre d'apparition.
    - Les entrées sans id ne sont jamais fusionnées.
    """
    merged: List[CartItem] = []
    index_by_id: Dict[str, int] = {}
    for item in items:
        if item.id is None or item.id not in index_by_id:
            if item.id is not None:
                index_by_id[item.id] = len(merged)
            merged.append(item)
            continue
        pos = index_by_id[item.id]
        merged[pos] = merged[pos].model_copy(update={"qty": merged[pos].qty + item.qty})
    return merged

def validate_items(payload: Any) -> List[CartItem]:
    """
    Extrait et valide la liste d'articles d'un payload JSON.
    - InvalidCartError("No items provided") si items absent, pas une liste ou vide.
    - InvalidCartError si une entrée est mal formée (prix/quantité non numériques, nom vide...).
    Tout ou rien: aucune acceptation partielle du panier.
    """
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list) or not items:
        raise InvalidCartError("No items provided")

    parsed: List[CartItem] = []
    for index, raw in enumerate(items):
        if not isinstance(raw, dict):
            raise InvalidCartError(f"Invalid item at index {index}")
        try:
            parsed.append(CartItem.model_validate(raw))
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise InvalidCartError(f"Invalid item at index {index}: {', '.join(fields)}") from e
    return aggregate_items(parsed)

def to_line_item(item: CartItem) -> LineItem:
    return LineItem(
        product_name=item.name,
        unit_amount=to_minor_units(item.price),
        quantity=item.qty,
    )

def to_line_items(items: Iterable[CartItem]) -> List[LineItem]:
    """Une ligne par article, dans l'ordre du panier. Déterministe et idempotent."""
    return [to_line_item(item) for item in items]

def subtotal_cents(items: Iterable[CartItem]) -> int:
    return sum(to_minor_units(item.price) * item.qty for item in items)


class Cart:
    """
    Panier tenu par le client: entrées ordonnées, ids uniques.
    Ajouter un produit déjà présent incrémente sa quantité, dans la limite du stock affiché.
    """

    def __init__(self, items: Optional[Iterable[CartItem]] = None):
        self._items: List[CartItem] = aggregate_items(items or [])

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self.items)

    def _index(self, item_id: str) -> Optional[int]:
        return next((i for i, it in enumerate(self._items) if it.id == item_id), None)

    def quantity_of(self, item_id: str) -> int:
        pos = self._index(item_id)
        return self._items[pos].qty if pos is not None else 0

    def remaining(self, product) -> int:
        return max(0, product.qty_available - self.quantity_of(product.id))

    def add(self, product) -> CartItem:
        """Ajoute une unité d'un produit du catalogue; SoldOutError si le stock affiché est atteint."""
        if self.remaining(product) <= 0:
            raise SoldOutError(f"{product.name} is sold out or the limit was reached")
        pos = self._index(product.id)
        if pos is None:
            item = CartItem(id=product.id, name=product.name, price=product.price, qty=1)
            self._items.append(item)
            return item
        item = self._items[pos].model_copy(update={"qty": self._items[pos].qty + 1})
        self._items[pos] = item
        return item

    def change_qty(self, item_id: str, delta: int) -> None:
        """Modifie la quantité (plancher à 1; utiliser remove pour retirer l'article)."""
        pos = self._index(item_id)
        if pos is None:
            return
        current = self._items[pos]
        self._items[pos] = current.model_copy(update={"qty": max(1, current.qty + delta)})

    def remove(self, item_id: str) -> None:
        self._items = [it for it in self._items if it.id != item_id]

    def clear(self) -> None:
        self._items = []

    @property
    def total_qty(self) -> int:
        return sum(it.qty for it in self._items)

    @property
    def subtotal_cents(self) -> int:
        return subtotal_cents(self._items)

    def summary(self, rule):
        from .shipping import summarize
        return summarize(self._items, rule)

    def to_payload(self) -> Dict[str, Any]:
        """Corps JSON de POST /create-checkout-session."""
        return {"items": [it.model_dump() for it in self._items]}
