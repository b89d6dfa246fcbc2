# Overview: Flask CLI command groups for bootstrap, CSV transfer, and scan diagnostics.

# backend/prodreg/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Use: python -m flask --app prodreg <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask --app prodreg system init
#   Create all tables (idempotent).
# - python -m flask --app prodreg system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask --app prodreg system seed-demo
#   Load demo users, products, locations, purposes, categories and 13 registrations.
#
# Registration log:
# - python -m flask --app prodreg registrations export [--user "Tom Peckstadt"] [--sort-by user] [-o out.csv]
#   Write the filtered + sorted history to CSV (default name product-registraties-<date>.csv).
# - python -m flask --app prodreg registrations import path/to/file.csv
#   Append every valid row; prints "<success> of <total> registrations imported".
#
# Scanner diagnostics:
# - python -m flask --app prodreg scan resolve "IF&(!"
#   Show how a raw scan is cleaned and which product (if any) it resolves to.

import click
from pathlib import Path
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .seed_data import seed_demo_data
from .services import catalog_service, registration_service
from .services.csv_codec import CsvError, export_csv, export_filename, import_csv
from .services.layout_remap import remap_from_config
from .services.query_service import (
    ALL,
    ORDER_NEWEST,
    SORT_DATE,
    SORT_KEYS,
    SORT_ORDERS,
    FilterCriteria,
    query_registrations,
)
from .services.scan_service import SCAN_MODES, MODE_REGISTRATION, resolve_scan


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create all tables. Safe to run repeatedly."""
    db.create_all()
    click.echo("PASS Database schema ready.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'flask system seed-demo' to load demo data.")


@system_group.command('seed-demo')
@with_appcontext
def seed_demo():
    """Load the demo data set (reference data is never duplicated)."""
    db.create_all()
    created = seed_demo_data()
    for key, count in created.items():
        click.echo(f"PASS {key}: {count} created")


@click.group('registrations')
def registrations_group():
    """Registration log import/export."""


@registrations_group.command('export')
@click.option('--query', default='', help='Free-text filter')
@click.option('--user', default=ALL, show_default=True)
@click.option('--location', default=ALL, show_default=True)
@click.option('--date-from', default='', help='YYYY-MM-DD (inclusive)')
@click.option('--date-to', default='', help='YYYY-MM-DD (inclusive)')
@click.option('--sort-by', type=click.Choice(SORT_KEYS), default=SORT_DATE, show_default=True)
@click.option('--sort-order', type=click.Choice(SORT_ORDERS), default=ORDER_NEWEST, show_default=True)
@click.option('-o', '--output', type=click.Path(dir_okay=False, path_type=Path), default=None)
@with_appcontext
def export_registrations(query, user, location, date_from, date_to, sort_by, sort_order, output):
    """Export the filtered + sorted history view to CSV."""
    try:
        criteria = FilterCriteria(
            query=query,
            user=user,
            location=location,
            date_from=date_from,
            date_to=date_to,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        view = query_registrations(registration_service.list_registrations(), criteria)
        content = export_csv(view)
    except ValueError as e:
        raise click.ClickException(str(e))

    if output is None:
        output = Path(export_filename(prefix=current_app.config.get("EXPORT_FILENAME_PREFIX", "product-registraties")))
    output.write_text(content, encoding="utf-8")
    click.echo(f"PASS {len(view)} registrations exported to {output}")


@registrations_group.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@with_appcontext
def import_registrations(path):
    """Import registrations from a CSV file."""
    try:
        summary = import_csv(path.read_text(encoding="utf-8"), registration_service.append_registration)
    except CsvError as e:
        raise click.ClickException(str(e))

    for error in summary.errors:
        click.echo(f"FAIL {error}", err=True)
    click.echo(f"PASS {summary.message}")


@click.group('scan')
def scan_group():
    """Scanner diagnostics."""


@scan_group.command('resolve')
@click.argument('raw')
@click.option('--mode', type=click.Choice(SCAN_MODES), default=MODE_REGISTRATION, show_default=True)
@with_appcontext
def resolve_scan_cli(raw, mode):
    """Show how RAW is cleaned and resolved against the current catalog."""
    resolution = resolve_scan(
        raw,
        catalog_service.list_products(),
        mode=mode,
        remapper=remap_from_config(current_app.config),
        categories=catalog_service.list_categories(),
    )
    if resolution is None:
        click.echo("Empty scan, nothing to resolve.")
        return

    click.echo(f"raw:        {resolution.raw}")
    click.echo(f"normalized: {resolution.normalized}")
    click.echo(f"code:       {resolution.code}")
    if resolution.matched_by:
        click.echo(f"matched by: {resolution.matched_by}")
    click.echo(("PASS " if resolution.ok else "FAIL ") + resolution.message)


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(registrations_group)
    app.cli.add_command(scan_group)
