# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/rta/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Set RTA_STORAGE_BACKEND=sql for commands that should persist.
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create tables (sql storage) and seed the resident registry if empty.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users.
# - python -m flask users create --username alice --password "secret123" --full-name "Alice" --company "ME"
#   Create a user (prompts for the password if omitted).
#
# Maintenance:
# - python -m flask maintenance cleanup-sessions
#   Delete expired and revoked session records.

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import ServiceError
from .extensions import db
from .seed import seed_residents
from .services import auth_service
from .services import session_service
from .storage import get_repository


def _warn_if_ephemeral():
    if get_repository().backend_name == "memory":
        click.echo("WARN  STORAGE_BACKEND is 'memory': changes are lost when this command exits.")


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Initialize storage: create tables and seed the resident registry.

    Idempotent: existing tables and residents are left alone.
    """
    click.echo("START Initializing RTA storage...")
    repo = get_repository()

    if repo.backend_name == "sql":
        db.create_all()
        click.echo(f"PASS Tables ready on {current_app.config['SQLALCHEMY_DATABASE_URI']}")
    else:
        _warn_if_ephemeral()

    created = seed_residents(repo)
    if created:
        click.echo(f"PASS Seeded {created} residents")
    else:
        click.echo(f"PASS Resident registry already has {repo.count_residents()} entries")

    click.echo("DONE RTA storage initialized")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        return
    if get_repository().backend_name != "sql":
        click.echo("FAIL reset-db only applies to sql storage")
        return

    db.drop_all()
    db.create_all()
    created = seed_residents(get_repository())
    click.echo(f"PASS Database reset ({created} residents seeded)")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users."""
    users = get_repository().list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Username':<24} {'Full name':<28} {'Role':<8} {'Company'}")
    click.echo("="*80)
    for user in users:
        click.echo(
            f"{user.id:<5} {user.username:<24} {(user.full_name or '-'):<28} {user.role:<8} {user.company or '-'}"
        )
    click.echo("="*80 + "\n")


@users_group.command('create')
@click.option('--username', prompt=True, help='Login name (case-sensitive, unique)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--full-name', default=None, help='Display name')
@click.option('--company', default=None, help='Company')
@with_appcontext
def create_user_cli(username, password, full_name, company):
    """Create a user account."""
    _warn_if_ephemeral()
    try:
        user = auth_service.register_user({
            "username": username,
            "password": password,
            "fullName": full_name,
            "company": company,
        })
    except ServiceError as e:
        click.echo(f"FAIL {e.message}")
        return
    click.echo(f"PASS Created user: {user.username} (ID: {user.id})")


@click.group('maintenance')
def maintenance_group():
    """Housekeeping commands."""


@maintenance_group.command('cleanup-sessions')
@with_appcontext
def cleanup_sessions():
    """Delete expired and revoked session records."""
    deleted = session_service.cleanup_expired_sessions()
    click.echo(f"PASS Deleted {deleted} session(s)")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
