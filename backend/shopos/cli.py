# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/shopos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init-db
#   Create the storage table (idempotent) and persist the bootstrapped state.
#
# State inspection/maintenance:
# - python -m flask state show
#   Print collection sizes, the unread notification count and storage records.
# - python -m flask state export backup.json
#   Write a backup document (business collections and settings).
# - python -m flask state import backup.json
#   Restore a backup document (users and session are kept).
# - python -m flask state clear --yes
#   Reset everything to the seed dataset.
# - python -m flask state scan-alerts
#   Add low-stock and expiry notifications for the current products.
#
# User inspection:
# - python -m flask users list
#   List users with role and phone.
# - python -m flask users reset-password UID-0002
#   Set a new password (prompted, policy-checked).

import json

import click
from flask.cli import with_appcontext

from .extensions import db, state_store
from .services import alerts_service
from .services.dispatch_service import dispatch_validated
from .services.state_view import backup_document
from .services.storage_service import list_records
from .state import actions as A
from .state.actions import Action
from .state.notifications import unread_count
from .validation import ValidationError, ConflictError


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create tables and persist the bootstrapped state tree."""
    db.create_all()
    state_store.reset()
    store = state_store.store
    if store.persistence.save(store.state):
        click.echo("Database initialised; state persisted.")
    else:
        raise click.ClickException("State could not be persisted")


@click.group('state')
def state_group():
    """State inspection and maintenance commands."""


@state_group.command('show')
@with_appcontext
def show_state():
    """Print collection sizes."""
    state = state_store.store.state
    click.echo("\n" + "="*50)
    click.echo(f"{'Collection':<30} {'Items':>10}")
    click.echo("="*50)
    for key in sorted(state):
        value = state[key]
        if isinstance(value, list):
            click.echo(f"{key:<30} {len(value):>10}")
    click.echo("="*50)
    notifications = state.get("notifications") or []
    click.echo(f"Unread notifications: {unread_count(notifications)}")
    click.echo(f"Shop: {(state.get('settings') or {}).get('shopName')}\n")

    for record in list_records():
        click.echo(f"  {record['key']:<30} {record['size']:>8} bytes  {record['updated_at']}")


@state_group.command('export')
@click.argument('path', type=click.Path(dir_okay=False, writable=True))
@with_appcontext
def export_state(path):
    """Write a backup document to PATH."""
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(backup_document(state_store.store.state), fh, indent=2)
    click.echo(f"Backup written to {path}")


@state_group.command('import')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def import_state(path):
    """Restore the backup document at PATH."""
    with open(path, "r", encoding="utf-8") as fh:
        try:
            document = json.load(fh)
        except ValueError as e:
            raise click.ClickException(f"Invalid backup file: {e}")

    try:
        dispatch_validated(state_store.store, {"type": A.RESTORE_BACKUP, "payload": document})
    except ValidationError as e:
        raise click.ClickException(str(e))
    click.echo("Backup restored.")


@state_group.command('clear')
@click.option('--yes', is_flag=True, help='Confirm the reset')
@with_appcontext
def clear_state(yes):
    """Reset all data to the seed dataset."""
    if not yes:
        raise click.ClickException("Refusing to clear data without --yes")
    state_store.store.dispatch(Action(A.CLEAR_ALL_DATA))
    click.echo("All data cleared; seed dataset restored.")


@state_group.command('scan-alerts')
@with_appcontext
def scan_alerts():
    """Add low-stock and expiry notifications."""
    added = alerts_service.scan_inventory_alerts(state_store.store)
    click.echo(f"Added {added} notification(s).")


@click.group('users')
def users_group():
    """User inspection commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = state_store.store.state.get("users") or []

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<15} {'Name':<25} {'Role':<15} {'Phone'}")
    click.echo("="*80)
    for user in users:
        click.echo(f"{user.get('id') or '':<15} {user.get('name') or '':<25} {user.get('role') or '':<15} {user.get('phone') or ''}")
    click.echo("="*80 + "\n")


@users_group.command('reset-password')
@click.argument('user_id')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='New password')
@with_appcontext
def reset_password(user_id, password):
    """Set a new password for USER_ID."""
    store = state_store.store
    if not any(u.get("id") == user_id for u in store.state.get("users") or []):
        raise click.ClickException(f"User not found: {user_id}")
    try:
        dispatch_validated(store, {
            "type": A.RESET_USER_PASSWORD,
            "payload": {"userId": user_id, "newPassword": password},
        })
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Password reset for {user_id}.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(state_group)
    app.cli.add_command(users_group)
