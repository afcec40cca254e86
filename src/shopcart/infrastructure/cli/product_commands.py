"""CLI commands for the product catalog."""

from __future__ import annotations

from pathlib import Path

import click

from shopcart.application.add_product import AddProductHandler
from shopcart.application.update_product import UpdateProductHandler
from shopcart.domain.exceptions import DomainException
from shopcart.infrastructure.bootstrap import product_repository


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price (e.g. 9.99).")
@click.pass_obj
def product_add(data_dir: Path, name: str, price: str) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository(data_dir))

    try:
        product = handler.handle(name=name, price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
@click.pass_obj
def product_list(data_dir: Path) -> None:
    """List all products in the catalog."""
    products = product_repository(data_dir).list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10}")
    click.echo("-" * 38)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {str(p.price):>10}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", required=True, help="New unit price (e.g. 10.49).")
@click.pass_obj
def product_update(data_dir: Path, product_id: str, price: str) -> None:
    """Change a product's price (existing cart lines keep theirs)."""
    handler = UpdateProductHandler(product_repo=product_repository(data_dir))

    try:
        handler.handle(product_id=product_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} price updated to ${price}")
