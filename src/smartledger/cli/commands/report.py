"""Financial report commands."""

import click
from smartledger.cli.error_handling import format_amount
from smartledger.domain.entities import BalanceSheetSection
from smartledger.domain.reports import balance_sheet, financial_summary


def print_section(title: str, section: BalanceSheetSection) -> None:
    """Print one balance sheet section."""
    click.echo(f"\n{title}")
    click.echo("-" * 60)
    for acc in section.accounts:
        click.echo(f"  {acc.code:>6s} {acc.name:35s} {format_amount(acc.balance):>15s}")
    click.echo(f"  {'Total ' + title:42s} {format_amount(section.total):>15s}")


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("summary")
@click.pass_context
def summary(ctx):
    """Show headline totals per account type."""
    engine = ctx.obj["engine"]
    result = financial_summary(engine.accounts)

    click.echo("\nFinancial summary:")
    click.echo("-" * 40)
    for label, amount in (
        ("Assets", result.total_assets),
        ("Liabilities", result.total_liabilities),
        ("Equity", result.total_equity),
        ("Revenue", result.total_revenue),
        ("Expenses", result.total_expenses),
        ("Net income", result.net_income),
    ):
        click.echo(f"{label:20s} {format_amount(amount):>18s}")


@report_group.command("balance-sheet")
@click.pass_context
def show_balance_sheet(ctx):
    """Show the balance sheet."""
    engine = ctx.obj["engine"]
    sheet = balance_sheet(engine.accounts)

    print_section("Assets", sheet.assets)
    print_section("Liabilities", sheet.liabilities)
    print_section("Equity", sheet.equity)

    click.echo("\n" + "=" * 60)
    click.echo(f"{'Total assets':44s} {format_amount(sheet.assets.total):>15s}")
    click.echo(f"{'Total liabilities and equity':44s} {format_amount(sheet.total_liabilities_and_equity):>15s}")
    click.echo(f"{'Net income (not yet closed)':44s} {format_amount(sheet.net_income):>15s}")
    click.echo("Balanced" if sheet.is_balanced else "NOT balanced")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
