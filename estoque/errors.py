# estoque/errors.py


class InventoryError(Exception):
    """Base class for errors raised by the inventory store."""


class InvalidProductData(InventoryError, ValueError):
    """A name, price or quantity outside the allowed range."""


class ProductNotFound(InventoryError, LookupError):
    def __init__(self, name: str):
        super().__init__(f"product not found: {name}")
        self.name = name


class PersistenceError(InventoryError):
    """The inventory file could not be written."""
