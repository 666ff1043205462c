"""CSV import command."""

import json

import click
from releve.cli.error_handling import handle_domain_error
from releve.domain.csv_import import CSVImportService
from releve.domain.errors import DomainError


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the import report as JSON")
@click.pass_context
def import_csv(ctx, csv_file: str, as_json: bool):
    """Import transactions from a bank statement CSV file."""
    db = ctx.obj["db"]
    service = CSVImportService(db, ctx.obj["user"])

    try:
        report = service.import_file(csv_file)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
        return

    click.echo("\nImport complete:")
    click.echo(f"  Rows: {report.total_rows} (delimiter '{report.delimiter}')")
    click.echo(f"  Imported: {report.imported} transactions")
    click.echo(f"  Updated: {report.updated} transactions")
    click.echo(f"  Skipped: {report.skipped} rows")
    if report.errors_sample:
        click.echo(f"  Errors (first {len(report.errors_sample)}):")
        for error in report.errors_sample:
            click.echo(f"    Row {error.row}: {error.reason}")
    if report.auto_categorized_top:
        click.echo("  Auto-categorized:")
        for name, count in report.auto_categorized_top:
            click.echo(f"    {name}: {count}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
