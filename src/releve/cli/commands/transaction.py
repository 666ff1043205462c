"""Transaction listing and category assignment commands."""

import click
from releve.cli.category_resolution import resolve_category_or_exit
from releve.cli.error_handling import handle_domain_error
from releve.domain.category import CategoryService, UNCATEGORIZED
from releve.domain.errors import DomainError
from releve.domain.merchants import merchant_from_label
from releve.domain.transaction import TransactionService


@click.group()
def transaction_group():
    """View and categorize transactions."""
    pass


@transaction_group.command("list")
@click.option("--month", help="Month to show (YYYY-MM, default: current month)")
@click.pass_context
def list_transactions(ctx, month: str | None):
    """List one month of transactions, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj["user"])
    category_service = CategoryService(db, ctx.obj["user"])

    try:
        transactions = service.list_transactions(month=month)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    categories = {cat.id: cat.name for cat in category_service.list_categories()}

    click.echo(f"{'ID':>6}  {'Date':<10}  {'Amount':>12}  {'Merchant':<24}  Category")
    click.echo("-" * 90)
    for txn in transactions:
        category_name = categories.get(txn.category_id, UNCATEGORIZED)
        merchant = merchant_from_label(txn.raw_label)[:24]
        click.echo(
            f"{txn.id:>6}  {txn.date.isoformat():<10}  {txn.amount:>12,.2f}  "
            f"{merchant:<24}  {category_name}"
        )


@transaction_group.command("categorize")
@click.argument("transaction_id", type=int)
@click.argument("category_name", required=False)
@click.option("--clear", is_flag=True, help="Remove the category")
@click.pass_context
def categorize_transaction(ctx, transaction_id: int, category_name: str | None, clear: bool):
    """Assign CATEGORY_NAME to a transaction, or clear it with --clear.

    Examples:
        releve transaction categorize 12 "Courses / Supermarché"
        releve transaction categorize 12 --clear
    """
    db = ctx.obj["db"]
    service = TransactionService(db, ctx.obj["user"])

    if not clear and not category_name:
        click.echo("Error: Provide a category name or --clear", err=True)
        ctx.exit(1)

    category_id = None
    if not clear:
        category_id = resolve_category_or_exit(
            ctx, CategoryService(db, ctx.obj["user"]), category_name
        )

    try:
        service.update_category(transaction_id, category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if clear:
        click.echo(f"Cleared category of transaction {transaction_id}")
    else:
        click.echo(f"Transaction {transaction_id} categorized as '{category_name}'")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
