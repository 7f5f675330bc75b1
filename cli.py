# cli.py
import logging
import sys
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from pathlib import Path
from typing import Any, List, Union

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.logging import RichHandler
from rich.markup import escape
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from estoque import config
from estoque.core import parse_amount, parse_name, parse_price, parse_quantity
from estoque.errors import InventoryError
from estoque.models import Product
from estoque.store import InventoryStore

console = Console()
LOGGER = logging.getLogger("estoque.cli")

MENU_CHOICES = ["1", "2", "3", "4", "5"]

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def money(value) -> str:
    # half-up, like the original R$ formatting
    value = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        cents = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{config.CURRENCY}{cents}"


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Product]):
    if not products:
        console.print("[italic yellow]No products in stock.[/italic yellow]")
        return

    table = Table(
        title="📦 Products in stock",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("Name", style="bold", min_width=20)
    table.add_column("Price", justify="right", min_width=10)
    table.add_column("Qty", justify="right", min_width=8)
    table.add_column("Total", justify="right", min_width=12)

    for p in products:
        table.add_row(escape(p.name), money(p.price), str(p.quantity), money(p.total))
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{escape(message)}[/{style}]", title="Status")


def try_op(fn, *args, **kwargs) -> Any:
    """
    Calls fn(*args, **kwargs). Store errors are shown as a red status panel
    and None is returned; the menu keeps running.
    """
    try:
        result = fn(*args, **kwargs)
    except InventoryError as e:
        console.print(show_status(f"Error: {e}", False))
        return None
    return result


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=20)
    header.add_column("center", width=36)
    header.add_column("right", width=22)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📦 Estoque",
        "[bold blue]Inventory management[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def show_menu():
    menu_table = Table.grid(padding=(0, 2))
    menu_table.add_column("Key", style="bold cyan", width=4)
    menu_table.add_column("Option", width=36)

    options = [
        ("1", "📋 List products"),
        ("2", "➕ Add product"),
        ("3", "➖ Remove quantity from product"),
        ("4", "💰 Show total stock value"),
        ("5", "💾 Save and exit"),
    ]
    for row in options:
        menu_table.add_row(*row)

    console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def get_product_completer(store: InventoryStore):
    return WordCompleter(store.names(), ignore_case=True)


# ---------------------------
# Menu actions
# ---------------------------
def list_products(store: InventoryStore):
    show_products(store.list_available())


def add_product(store: InventoryStore):
    name = parse_name(prompt_with_autocomplete("Product name:", completer=get_product_completer(store)))
    if not name.ok:
        console.print(show_status(name.error, False))
        return

    price = parse_price(prompt_with_autocomplete("Price (e.g. 12.50):"))
    if not price.ok:
        console.print(show_status(price.error, False))
        return

    qty = parse_quantity(prompt_with_autocomplete("Quantity:"))
    if not qty.ok:
        console.print(show_status(qty.error, False))
        return

    result = try_op(store.add, name.value, price.value, qty.value)
    if result is None:
        return
    product, created = result
    if created:
        console.print(show_status(f"Product added: {product.name} with {product.quantity} units."))
    else:
        console.print(show_status(f"Product updated: {product.name} now has {product.quantity} units."))


def deduct_product(store: InventoryStore):
    raw = prompt_with_autocomplete("Product name to remove from:", completer=get_product_completer(store))
    product = store.find(raw.strip())
    if product is None:
        console.print(show_status("Product not found.", False))
        return

    amount = parse_amount(prompt_with_autocomplete(
        f"Quantity to remove from {product.name} (current stock: {product.quantity}):"
    ))
    if not amount.ok:
        console.print(show_status(amount.error, False))
        return

    left = try_op(store.deduct, product.name, amount.value)
    if left is None:
        return
    if left == 0:
        console.print(show_status(f"{product.name} is now out of stock."))
    else:
        console.print(show_status(f"{product.name} now has {left} units."))


def show_total(store: InventoryStore):
    console.print(Panel.fit(
        f"💰 [bold]Total stock value:[/bold] [green]{money(store.total_value())}[/green]",
        border_style="green"
    ))


def save_and_exit(store: InventoryStore, path: Union[str, Path]):
    try:
        store.save(path)
    except InventoryError as e:
        console.print(show_status(f"Error: {e}", False))
        return
    console.print(Panel.fit("[bold green]Inventory saved. Bye! 👋[/bold green]", title="Goodbye"))
    sys.exit(0)


# ---------------------------
# Main menu
# ---------------------------
def menu(store: InventoryStore, path: Union[str, Path] = config.DATA_FILE):
    console.print(create_header())

    while True:
        show_menu()
        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(MENU_CHOICES)
        ).strip()

        if choice == "1":
            list_products(store)
        elif choice == "2":
            add_product(store)
        elif choice == "3":
            deduct_product(store)
        elif choice == "4":
            show_total(store)
        elif choice == "5":
            save_and_exit(store, path)
        else:
            console.print(show_status("Invalid option. Try again.", False))

        # Add a separator before next iteration
        console.print()
        console.rule(style="dim")


def setup_logging():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    setup_logging()
    try:
        store = InventoryStore.load(config.DATA_FILE)
        LOGGER.debug("Starting menu with %d products", len(store))
        menu(store, config.DATA_FILE)
    except (KeyboardInterrupt, EOFError):
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
