"""Ledger integrity check command."""

import click
from smartledger.domain.integrity import check_integrity


@click.command("check")
@click.pass_context
def check_ledger(ctx):
    """Check stored data for dangling references, cycles and unbalanced entries.

    Exits with status 1 when any problem is found.
    """
    engine = ctx.obj["engine"]
    issues = check_integrity(engine.state.accounts, engine.state.transactions)

    if not issues:
        click.echo("No problems found.")
        return

    click.echo(f"Found {len(issues)} problem{'s' if len(issues) != 1 else ''}:")
    for issue in issues:
        click.echo(f"  [{issue.kind}] {issue.message}")
    ctx.exit(1)


def register_commands(cli):
    """Register check command with main CLI."""
    cli.add_command(check_ledger)
