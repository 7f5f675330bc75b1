# estoque/store.py
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from estoque.database import load_products, save_products
from estoque.errors import InvalidProductData, ProductNotFound
from estoque.models import Product, name_key


def _to_price(value) -> Decimal:
    try:
        price = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidProductData(f"invalid price: {value!r}") from e
    if not price.is_finite() or price < 0:
        raise InvalidProductData("price must be >= 0")
    return price


class InventoryStore:
    """
    In-memory product collection. Products keep their insertion order and
    are never removed, only brought down to zero quantity.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: List[Product] = []
        for p in products or []:
            self.add(p.name, p.price, p.quantity)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "InventoryStore":
        return cls(load_products(path))

    def save(self, path: Union[str, Path]) -> None:
        save_products(path, self._products)

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self):
        return iter(self._products)

    def names(self) -> List[str]:
        return [p.name for p in self._products]

    def find(self, name: str) -> Optional[Product]:
        key = name_key(name or "")
        for p in self._products:
            if p.key == key:
                return p
        return None

    def list_available(self) -> List[Product]:
        """Products with stock, most expensive first."""
        available = [p for p in self._products if p.quantity > 0]
        return sorted(available, key=lambda p: p.price, reverse=True)

    def add(self, name: str, price, quantity: int) -> Tuple[Product, bool]:
        """
        Adds stock. An existing product (matched ignoring case) gets its
        quantity increased and keeps its price; otherwise a new product is
        appended. Returns the product and whether it was created.
        """
        name = (name or "").strip()
        if not name:
            raise InvalidProductData("name must not be empty")
        price = _to_price(price)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise InvalidProductData("quantity must be >= 0")

        existing = self.find(name)
        if existing is not None:
            existing.quantity += quantity
            return existing, False

        product = Product(name=name, price=price, quantity=quantity)
        self._products.append(product)
        return product, True

    def deduct(self, name: str, amount: int) -> int:
        """Removes `amount` units, bottoming out at zero. Returns what is left."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidProductData("amount must be > 0")
        product = self.find(name)
        if product is None:
            raise ProductNotFound(name)

        if amount >= product.quantity:
            product.quantity = 0
        else:
            product.quantity -= amount
        return product.quantity

    def total_value(self) -> Decimal:
        return sum((p.total for p in self._products if p.quantity > 0), Decimal("0"))
