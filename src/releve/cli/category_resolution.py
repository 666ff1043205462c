"""CLI helper for turning a category name into an ID."""

from __future__ import annotations

import click
from releve.domain.category import CategoryService
from releve.domain.errors import category_name_not_found


def resolve_category_or_exit(ctx: click.Context, service: CategoryService, name: str) -> int:
    """Resolve a category name to its ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    category = service.get_category_by_name(name)
    if category is None:
        click.echo(f"Error: {category_name_not_found(name)}", err=True)
        ctx.exit(1)
    return category.id
