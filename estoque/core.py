# estoque/core.py
# Parsing of raw console input. Each parser returns a Validated pair
# instead of raising, so the menu can print the error and carry on.
import re
from decimal import Decimal, InvalidOperation
from typing import Any, NamedTuple, Optional

_INT_RE = re.compile(r"^[+-]?\d+$")


class Validated(NamedTuple):
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _parse_int(raw: str) -> Optional[int]:
    text = (raw or "").strip()
    if not _INT_RE.match(text):
        return None
    return int(text)


def parse_name(raw: str) -> Validated:
    name = (raw or "").strip()
    if not name:
        return Validated(error="Invalid name.")
    return Validated(name)


def parse_price(raw: str) -> Validated:
    """Accepts `12.50` as well as `12,50`; the price must be >= 0."""
    text = (raw or "").strip().replace(",", ".")
    try:
        price = Decimal(text)
    except InvalidOperation:
        return Validated(error="Invalid price.")
    if not price.is_finite() or price < 0:
        return Validated(error="Invalid price.")
    return Validated(price)


def parse_quantity(raw: str) -> Validated:
    qty = _parse_int(raw)
    if qty is None or qty < 0:
        return Validated(error="Invalid quantity.")
    return Validated(qty)


def parse_amount(raw: str) -> Validated:
    """Quantity to deduct: strictly positive."""
    amount = _parse_int(raw)
    if amount is None or amount <= 0:
        return Validated(error="Invalid quantity.")
    return Validated(amount)
