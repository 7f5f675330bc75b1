# tests/test_database.py
import json
import logging
from decimal import Decimal

import pytest

from estoque.database import load_products, save_products, seed_products
from estoque.errors import PersistenceError
from estoque.models import Product
from estoque.store import InventoryStore


def as_tuples(products):
    return sorted((p.name, p.price, p.quantity) for p in products)


def test_missing_file_gives_seed_products(tmp_path):
    products = load_products(tmp_path / "estoque.json")
    assert as_tuples(products) == [
        ("Caderno", Decimal("12.5"), 10),
        ("Caneta", Decimal("2.3"), 50),
        ("Mochila", Decimal("89.9"), 5),
    ]


def test_seed_products_are_fresh_copies():
    first = seed_products()
    first[0].quantity = 0
    assert seed_products()[0].quantity == 10


def test_save_writes_indented_json_array(tmp_path):
    path = tmp_path / "estoque.json"
    save_products(path, [Product(name="Caderno", price=Decimal("12.5"), quantity=10)])

    text = path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert json.loads(text) == [{"name": "Caderno", "price": 12.5, "quantity": 10}]


def test_round_trip(tmp_path):
    path = tmp_path / "estoque.json"
    store = InventoryStore.load(path)
    store.add("Régua", Decimal("4.99"), 3)
    store.deduct("Mochila", 5)
    store.save(path)

    reloaded = InventoryStore.load(path)
    assert as_tuples(reloaded) == as_tuples(store)
    # zero quantity products are persisted too
    assert reloaded.find("mochila").quantity == 0
    assert "Régua" in path.read_text(encoding="utf-8")


def test_save_creates_parent_directory(tmp_path):
    path = tmp_path / "data" / "estoque.json"
    save_products(path, [])
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_save_failure_raises_persistence_error(tmp_path):
    # a directory where the file should be
    path = tmp_path / "estoque.json"
    path.mkdir()
    with pytest.raises(PersistenceError):
        save_products(path, seed_products())


@pytest.mark.parametrize("content", [
    "not json",
    '{"name": "A", "price": 1, "quantity": 1}',
    '[{"name": "A", "price": -1, "quantity": 1}]',
    '[{"name": "", "price": 1, "quantity": 1}]',
    '[{"name": "A", "price": 1}]',
    '["A"]',
])
def test_malformed_file_gives_empty_list_and_warning(tmp_path, caplog, content):
    path = tmp_path / "estoque.json"
    path.write_text(content, encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="estoque.database"):
        products = load_products(path)

    assert products == []
    assert "Could not load inventory file" in caplog.text


def test_null_document_is_empty(tmp_path):
    path = tmp_path / "estoque.json"
    path.write_text("null", encoding="utf-8")
    assert load_products(path) == []


def test_load_keeps_decimal_prices_and_ignores_extra_keys(tmp_path):
    path = tmp_path / "estoque.json"
    path.write_text(
        '[{"name": "Caneta", "price": 2.3, "quantity": 50, "total": 115.0}]',
        encoding="utf-8",
    )
    [product] = load_products(path)
    assert product.price == Decimal("2.3")
    assert product.total == Decimal("115.0")


def test_load_merges_duplicate_names(tmp_path, caplog):
    path = tmp_path / "estoque.json"
    path.write_text(json.dumps([
        {"name": "Caneta", "price": 2.3, "quantity": 5},
        {"name": "caneta", "price": 3, "quantity": 2},
    ]), encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="estoque.database"):
        products = load_products(path)

    assert len(products) == 1
    assert products[0].name == "Caneta"
    assert products[0].quantity == 7
    assert "Duplicate product" in caplog.text


def test_round_trip_keeps_exact_decimal_prices(tmp_path):
    path = tmp_path / "estoque.json"
    store = InventoryStore()
    store.add("Precise", Decimal("0.12345678901234567890"), 1)
    store.add("Big", Decimal("1e400"), 2)
    store.add("Pen", Decimal("2.30"), 3)
    store.save(path)

    reloaded = InventoryStore.load(path)
    assert len(reloaded) == 3
    assert reloaded.find("precise").price == Decimal("0.12345678901234567890")
    assert reloaded.find("big").price == Decimal("1e400")
    assert reloaded.find("pen").price == Decimal("2.30")


def test_saved_prices_are_plain_json_numbers(tmp_path):
    path = tmp_path / "estoque.json"
    save_products(path, [Product(name="Big", price=Decimal("1e400"), quantity=1)])

    text = path.read_text(encoding="utf-8")
    assert "Infinity" not in text
    assert '"price": 1E+400' in text
    [record] = json.loads(text, parse_float=Decimal)
    assert record["price"] == Decimal("1E+400")
