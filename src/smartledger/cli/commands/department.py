"""Department management commands."""

import click
from smartledger.cli.error_handling import format_amount, handle_domain_error
from smartledger.domain.errors import department_not_found
from smartledger.utils.amount_parser import parse_amount


@click.group()
def department_group():
    """Manage departments."""
    pass


@department_group.command("list")
@click.pass_context
def list_departments(ctx):
    """List departments with budget usage."""
    engine = ctx.obj["engine"]

    departments = engine.departments
    if not departments:
        click.echo("No departments found.")
        return

    click.echo("\nDepartments:")
    click.echo("-" * 80)
    for dept in departments:
        used = (dept.expenses / dept.budget * 100) if dept.budget > 0 else 0
        click.echo(
            f"{dept.id:8s} | {dept.name:28s} | {dept.manager:20s} | "
            f"{format_amount(dept.expenses)} / {format_amount(dept.budget)} ({used:.0f}%)"
        )


@department_group.command("create")
@click.argument("name")
@click.option("--manager", default="", help="Department manager")
@click.option("--description", default="", help="Description")
@click.option("--budget", default="0", help="Budget amount")
@click.pass_context
def create_department(ctx, name: str, manager: str, description: str, budget: str):
    """Create a department."""
    engine = ctx.obj["engine"]

    try:
        state = engine.add_department(
            name=name, manager=manager, description=description, budget=parse_amount(budget)
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created department '{name}' (ID: {state.departments[-1].id})")


@department_group.command("delete")
@click.argument("department_id")
@click.pass_context
def delete_department(ctx, department_id: str):
    """Delete a department."""
    engine = ctx.obj["engine"]

    department = engine.state.get_department(department_id)
    if department is None:
        click.echo(f"Error: {department_not_found(department_id)}", err=True)
        ctx.exit(1)

    engine.delete_department(department_id)
    click.echo(f"Deleted department '{department.name}'")


def register_commands(cli):
    """Register department commands with main CLI."""
    cli.add_command(department_group, name="department")
