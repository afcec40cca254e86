from pathlib import Path

import click

from shopcart.infrastructure.bootstrap import DATA_DIR_ENVVAR, DEFAULT_DATA_DIR
from shopcart.infrastructure.cli.cart_commands import (
    cart_add,
    cart_cancel,
    cart_confirm,
    cart_history,
    cart_remove,
    cart_show,
)
from shopcart.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_update,
)
from shopcart.infrastructure.logging import configure_logging


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_DATA_DIR,
    envvar=DATA_DIR_ENVVAR,
    show_default=True,
    help="Directory holding carts.json and products.json.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path, verbose: bool) -> None:
    """shopcart: event-sourced shopping carts"""
    configure_logging(verbose)
    ctx.obj = data_dir


@cli.group()
def cart() -> None:
    """Manage shopping carts."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_remove)
cart.add_command(cart_confirm)
cart.add_command(cart_cancel)
cart.add_command(cart_show)
cart.add_command(cart_history)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
