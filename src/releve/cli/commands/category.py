"""Category management commands."""

import click
from releve.cli.error_handling import handle_domain_error
from releve.domain.category import CategoryService, split_category
from releve.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories grouped by their first level."""
    service = CategoryService(ctx.obj["db"], ctx.obj["user"])

    groups = service.get_category_groups()
    if not groups:
        click.echo("No categories found. Import a CSV file or create one.")
        return

    click.echo("\nCategories:")
    for group, categories in groups.items():
        click.echo(group)
        for cat in categories:
            _, sub = split_category(cat.name)
            click.echo(f"  {sub} (ID: {cat.id})")


@category_group.command("create")
@click.argument("name")
@click.pass_context
def create_category(ctx, name: str):
    """Create a new category, e.g. "Loisirs / Cinéma"."""
    service = CategoryService(ctx.obj["db"], ctx.obj["user"])

    try:
        category_id = service.create_category(name=name)
        click.echo(f"Created category '{service.get_category(category_id).name}' (ID: {category_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
