"""
Custom Flask CLI commands.

These commands are registered with the app via ``register_commands()``
in the application factory. Run them with ``flask <command_name>``.

Usage::

    flask db-check           # Verify database connectivity and schema
    flask seed-departments   # Load sample department records
"""

import click
from flask.cli import with_appcontext
from sqlalchemy import inspect

from jurusan.extensions import db
from jurusan.models.department import STATUS_ACTIVE, Department
from jurusan.services import department_service
from jurusan.services.errors import DepartmentServiceError

# Sample records for a fresh development database.
SAMPLE_DEPARTMENTS = [
    ("Teknik Informatika", "TI"),
    ("Sistem Informasi", "SI"),
    ("Teknik Elektro", "TE"),
    ("Manajemen", "MJ"),
    ("Akuntansi", "AK"),
]


@click.command("db-check")
@with_appcontext
def db_check_command():
    """
    Verify database connectivity and confirm the jurusan table exists.

    Useful for confirming DATABASE_URL is correct and that
    ``flask db upgrade`` has been run.
    """
    click.echo("=" * 60)
    click.echo("  Jurusan — Database Connectivity Check")
    click.echo("=" * 60)

    click.echo(f"\n  Connection string: {db.engine.url.render_as_string(hide_password=True)}\n")

    # -- Step 1: Basic connectivity ----------------------------------------
    click.echo("[1/2] Testing connection...")
    try:
        row = db.session.execute(db.text("SELECT 1 AS connected")).fetchone()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        click.secho(f"      ✗ Connection failed: {exc}", fg="red")
        click.echo("\n  Is DATABASE_URL set and the database server running?")
        return
    if not row or row[0] != 1:
        click.secho("      ✗ Unexpected result from test query.", fg="red")
        return
    click.secho(f"      ✓ Connected ({db.engine.dialect.name}).", fg="green")

    # -- Step 2: Table and row counts --------------------------------------
    click.echo("[2/2] Checking the jurusan table...")
    if not inspect(db.engine).has_table(Department.__tablename__):
        click.secho("      ✗ Table 'jurusan' not found.", fg="red")
        click.echo("        Have you run 'flask db upgrade'?")
        return

    total = db.session.query(Department).count()
    live = department_service.count_live()
    click.echo(f"      {live} live, {total - live} in the trash")

    click.echo("\n" + "=" * 60)
    click.secho("  All checks passed. Database is ready.", fg="green", bold=True)
    click.echo("=" * 60)


@click.command("seed-departments")
@with_appcontext
def seed_departments_command():
    """Create the sample departments, skipping names that already exist."""
    created = 0
    for name, abbreviation in SAMPLE_DEPARTMENTS:
        try:
            result = department_service.create_department(
                name=name, status=STATUS_ACTIVE, abbreviation=abbreviation
            )
        except DepartmentServiceError as exc:
            click.echo(f"  - {name}: {exc}")
            continue
        if result.in_trash:
            click.echo(f"  - {name}: in the trash as {result.trashed_id}")
            continue
        created += 1
        click.secho(f"  ✓ {result.department.id}  {name}", fg="green")

    click.echo(f"\nCreated {created} of {len(SAMPLE_DEPARTMENTS)} departments.")


def register_commands(app):
    """Register all custom CLI commands with the Flask application."""
    app.cli.add_command(db_check_command)
    app.cli.add_command(seed_departments_command)
