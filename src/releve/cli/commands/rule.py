"""Categorization rule commands."""

import click
from releve.cli.category_resolution import resolve_category_or_exit
from releve.cli.error_handling import handle_domain_error
from releve.domain.category import CategoryService
from releve.domain.errors import DomainError
from releve.domain.rules import RuleService


@click.group()
def rule_group():
    """Manage categorization rules."""
    pass


@rule_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List rules, most recent first."""
    db = ctx.obj["db"]
    service = RuleService(db, ctx.obj["user"])
    category_service = CategoryService(db, ctx.obj["user"])

    rules = service.list_rules()
    if not rules:
        click.echo("No rules found.")
        return

    for rule in rules:
        category = category_service.get_category(rule.category_id)
        category_name = category.name if category else "?"
        state = "enabled" if rule.is_enabled else "disabled"
        click.echo(f"{rule.id}: '{rule.pattern}' -> {category_name} ({state})")


@rule_group.command("create")
@click.argument("pattern")
@click.argument("category_name")
@click.pass_context
def create_rule(ctx, pattern: str, category_name: str):
    """Create a rule assigning CATEGORY_NAME to labels containing PATTERN."""
    db = ctx.obj["db"]
    service = RuleService(db, ctx.obj["user"])
    category_id = resolve_category_or_exit(
        ctx, CategoryService(db, ctx.obj["user"]), category_name
    )

    try:
        rule_id = service.create_rule(pattern=pattern, category_id=category_id)
        click.echo(f"Created rule {rule_id}: '{pattern}' -> {category_name}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("toggle")
@click.argument("rule_id", type=int)
@click.pass_context
def toggle_rule(ctx, rule_id: int):
    """Enable a disabled rule or disable an enabled one."""
    service = RuleService(ctx.obj["db"], ctx.obj["user"])

    try:
        enabled = service.toggle_rule(rule_id)
        click.echo(f"Rule {rule_id} {'enabled' if enabled else 'disabled'}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule."""
    service = RuleService(ctx.obj["db"], ctx.obj["user"])

    try:
        service.delete_rule(rule_id)
        click.echo(f"Deleted rule {rule_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("apply")
@click.option("--month", help="Only transactions of this month (YYYY-MM)")
@click.pass_context
def apply_rules(ctx, month: str | None):
    """Categorize uncategorized transactions with the enabled rules."""
    service = RuleService(ctx.obj["db"], ctx.obj["user"])

    try:
        updated = service.apply_rules(month=month)
        click.echo(f"Updated {updated} transaction{'s' if updated != 1 else ''}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
