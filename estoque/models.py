# estoque/models.py
from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


def name_key(name: str) -> str:
    """Case-insensitive lookup key for a product name."""
    return name.strip().casefold()


class Product(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=0)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @property
    def key(self) -> str:
        return name_key(self.name)

    @property
    def total(self) -> Decimal:
        return self.price * self.quantity

    def to_record(self) -> Dict[str, Any]:
        # price stays a Decimal; database.save_products writes its exact text
        return {
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
        }
