"""CLI commands for the ShoppingCart aggregate."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from pathlib import Path

import click

from shopcart.application.dto import CartDTO
from shopcart.application.handle_cart_command import CartCommandHandler
from shopcart.application.show_cart import ShowCartHandler
from shopcart.application.show_cart_history import ShowCartHistoryHandler
from shopcart.domain.exceptions import DomainException
from shopcart.domain.model.commands import AddProduct, Cancel, CartCommand, Confirm, RemoveProduct
from shopcart.domain.model.events import CartEvent
from shopcart.domain.model.value_objects import PricedProductItem, ProductItem
from shopcart.infrastructure.bootstrap import cart_decider, cart_repository

cart_id_option = click.option("--cart-id", required=True, help="Cart ID.")


def _dispatch(data_dir: Path, cart_id: str, build: Callable[[], CartCommand]) -> list[CartEvent]:
    """Build the command and run it, turning domain errors into CLI errors."""
    handler = CartCommandHandler(
        decider=cart_decider(data_dir),
        cart_repo=cart_repository(data_dir),
    )
    try:
        command: CartCommand = build()
        return handler.handle(cart_id, command)
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("add")
@click.option("--cart-id", default=None, help="Cart ID (a new cart is opened when omitted).")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", required=True, type=int, help="Quantity to add.")
@click.option("--client", "client_id", default=None, help="Client ID, recorded when the cart opens.")
@click.pass_obj
def cart_add(
    data_dir: Path,
    cart_id: str | None,
    product_id: str,
    quantity: int,
    client_id: str | None,
) -> None:
    """Add a product to a cart, opening the cart if needed."""
    cart_id = cart_id or str(uuid.uuid4())
    events = _dispatch(
        data_dir,
        cart_id,
        lambda: AddProduct(cart_id, ProductItem(product_id, quantity), client_id),
    )

    if len(events) > 1:
        click.echo(f"Cart {cart_id} opened.")
    added = events[-1].product_item  # type: ignore[union-attr]
    click.echo(f"Added {added.quantity} x {added.product_id} at ${added.unit_price:.2f}.")


@click.command("remove")
@cart_id_option
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", required=True, type=int, help="Quantity to remove.")
@click.option("--price", required=True, help="Unit price of the line (e.g. 9.99).")
@click.pass_obj
def cart_remove(data_dir: Path, cart_id: str, product_id: str, quantity: int, price: str) -> None:
    """Remove units from the cart line with the given product and price."""
    _dispatch(
        data_dir,
        cart_id,
        lambda: RemoveProduct(cart_id, PricedProductItem.of(product_id, quantity, price)),
    )
    click.echo(f"Removed {quantity} x {product_id} from cart {cart_id}.")


@click.command("confirm")
@cart_id_option
@click.option("--client", "client_id", default=None, help="Client confirming the cart.")
@click.pass_obj
def cart_confirm(data_dir: Path, cart_id: str, client_id: str | None) -> None:
    """Confirm a pending cart."""
    events = _dispatch(data_dir, cart_id, lambda: Confirm(cart_id, client_id))

    if events:
        click.echo(f"Cart {cart_id} confirmed.")
    else:
        click.echo(f"Cart {cart_id} is already closed; nothing to do.")


@click.command("cancel")
@cart_id_option
@click.pass_obj
def cart_cancel(data_dir: Path, cart_id: str) -> None:
    """Cancel a pending cart."""
    events = _dispatch(data_dir, cart_id, lambda: Cancel(cart_id))

    if events:
        click.echo(f"Cart {cart_id} cancelled.")
    else:
        click.echo(f"Cart {cart_id} is already closed; nothing to do.")


def _display_cart(dto: CartDTO) -> None:
    click.echo(f"Cart {dto.id}  (status={dto.status}, version={dto.version})")
    click.echo(f"Client: {dto.client_id or '-'}")
    click.echo(f"Opened: {dto.opened_at}")
    if dto.closed_at:
        click.echo(f"Closed: {dto.closed_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Cart Total':<20} {dto.item_count:>5} {dto.total:>21}")


@click.command("show")
@cart_id_option
@click.pass_obj
def cart_show(data_dir: Path, cart_id: str) -> None:
    """Show the current projection of a cart."""
    handler = ShowCartHandler(cart_repo=cart_repository(data_dir))

    try:
        dto = handler.handle(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("history")
@cart_id_option
@click.pass_obj
def cart_history(data_dir: Path, cart_id: str) -> None:
    """List every event recorded for a cart, oldest first."""
    handler = ShowCartHistoryHandler(cart_repo=cart_repository(data_dir))

    try:
        entries = handler.handle(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for number, entry in enumerate(entries, start=1):
        click.echo(f"{number:>3}. {entry.occurred_at}  {entry.type:<15} {entry.details}")
