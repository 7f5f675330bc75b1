# estoque/database.py
import json
import logging
import re
import uuid
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from estoque.config import JSON_INDENT
from estoque.errors import PersistenceError
from estoque.models import Product

LOGGER = logging.getLogger(__name__)

# Products used when there is no inventory file yet.
SEED_PRODUCTS = (
    ("Caderno", "12.5", 10),
    ("Caneta", "2.3", 50),
    ("Mochila", "89.9", 5),
)


def seed_products() -> List[Product]:
    return [Product(name=n, price=Decimal(p), quantity=q) for n, p, q in SEED_PRODUCTS]


def _merge_duplicates(products: List[Product]) -> List[Product]:
    merged: List[Product] = []
    by_key = {}
    for p in products:
        first = by_key.get(p.key)
        if first is None:
            by_key[p.key] = p
            merged.append(p)
            continue
        LOGGER.warning("Duplicate product %r in inventory file, merging into %r", p.name, first.name)
        first.quantity += p.quantity
    return merged


def load_products(path: Union[str, Path]) -> List[Product]:
    """
    Reads the inventory file. A missing file gives the seed products;
    an unreadable or malformed one gives an empty list and a warning.
    """
    path = Path(path)
    if not path.exists():
        LOGGER.info("No inventory file at %s, starting with example products", path)
        return seed_products()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"), parse_float=Decimal)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise TypeError(f"expected a JSON array, got {type(raw).__name__}")
        products = [Product.model_validate(record) for record in raw]
    except (OSError, ValueError, TypeError) as e:
        LOGGER.warning("Could not load inventory file %s, starting empty: %s", path, e)
        return []

    LOGGER.info("Loaded %d products from %s", len(products), path)
    return _merge_duplicates(products)


def _dumps(records: List[Dict[str, Any]]) -> str:
    # json has no exact Decimal output: emit a tagged string, then unquote it
    tag = uuid.uuid4().hex

    def default(o):
        if isinstance(o, Decimal):
            return f"{tag}:{o}"
        raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")

    text = json.dumps(records, indent=JSON_INDENT, ensure_ascii=False, default=default)
    return re.sub(rf'"{tag}:([-+0-9.eE]+)"', r"\1", text)


def save_products(path: Union[str, Path], products: Iterable[Product]) -> None:
    path = Path(path)
    records = [p.to_record() for p in products]
    text = _dumps(records)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"could not write {path}: {e}") from e
    LOGGER.info("Saved %d products to %s", len(records), path)
