"""
pos-discount command line.

Usage:
    pos-discount [OPTIONS] COMMAND [ARGS]...
"""
from __future__ import annotations

import json
import logging

import click
from rich.console import Console
from rich.table import Table

from pos_discount.config import load_settings
from pos_discount.engine import CheckoutEngine
from pos_discount.exceptions import DiscountEngineError
from pos_discount.loader import load_products
from pos_discount.logging import configure_logging
from pos_discount.models import CartContext
from pos_discount.presets import PRESETS

console = Console()


@click.group()
@click.version_option(package_name="pos-discount", message="%(prog)s %(version)s")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose: bool):
    """Price a cart of products against discount rules."""
    ctx.ensure_object(dict)

    settings = load_settings()
    configure_logging(
        level=logging.DEBUG if verbose else settings.log_level,
        json_format=settings.json_logs,
        log_file=settings.log_file,
    )

    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("products_file", required=False, type=click.Path(dir_okay=False))
@click.option("--preset", type=click.Choice(sorted(PRESETS)), default="boxes", help="Rule set to apply")
@click.option("--strict", is_flag=True, help="Fail on invalid discounts instead of clamping")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
@click.pass_context
def checkout(ctx, products_file: str | None, preset: str, strict: bool, output_format: str):
    """Run checkout on PRODUCTS_FILE and print the receipt."""
    settings = ctx.obj["settings"]
    products_file = products_file or settings.products_file

    try:
        cart = CartContext()
        cart.add_products(load_products(products_file))
        engine = CheckoutEngine(
            PRESETS[preset](),
            validation_mode="strict" if strict else settings.validation_mode,
        )
        result = engine.checkout_process(cart)
    except DiscountEngineError as e:
        if output_format == "json":
            click.echo(json.dumps(e.to_dict(), ensure_ascii=False))
        else:
            console.print(f"[red]Error:[/red] {e.message}")
            for problem in e.details.get("problems", []):
                console.print(f"  - {problem}")
        ctx.exit(1)

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False))
        return

    symbol = settings.currency_symbol

    items = Table(title="Purchased items")
    items.add_column("ID", style="dim", justify="right")
    items.add_column("SKU", style="cyan")
    items.add_column("Name")
    items.add_column("Price", justify="right")
    items.add_column("Discount", style="green", justify="right")
    items.add_column("Final", justify="right")
    items.add_column("Tags", style="dim")
    items.add_column("Notes", style="yellow")
    for p in sorted(cart.purchased_items, key=lambda p: ";".join(p.notes)):
        items.add_row(
            str(p.id),
            p.sku,
            p.name,
            f"{symbol}{p.price}",
            f"{symbol}{p.discount}",
            f"{symbol}{p.net_price}",
            p.tags_value,
            ";".join(p.notes),
        )
    console.print(items)

    if result.discounts:
        discounts = Table(title="Discounts")
        discounts.add_column("#", style="dim", justify="right")
        discounts.add_column("Rule", style="cyan")
        discounts.add_column("Note")
        discounts.add_column("Items", style="dim")
        discounts.add_column("Amount", style="green", justify="right")
        for d in result.discounts:
            discounts.add_row(
                str(d.discount_id),
                d.rule.name,
                d.rule.note,
                ",".join(str(p.id) for p in d.products),
                f"{symbol}{d.amount}",
            )
        console.print(discounts)

    for issue in result.issues:
        console.print(f"[yellow]Warning:[/yellow] {issue.rule_name}: {issue.message}")

    console.print(f"\nTotal Price: [bold green]{symbol}{result.total_price}[/bold green]")


@cli.command()
def presets():
    """List available rule presets."""
    table = Table(title="Rule presets")
    table.add_column("Preset", style="cyan")
    table.add_column("Rules")
    for name in sorted(PRESETS):
        table.add_row(name, "\n".join(rule.name for rule in PRESETS[name]()))
    console.print(table)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
