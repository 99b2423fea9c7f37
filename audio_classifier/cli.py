# audio_classifier/cli.py
import click
from flask import current_app
from flask.cli import with_appcontext
from . import db
from .core.database import ROLE_ADMINISTRATOR, ROLE_USER
from .services.auth_service import AuthGuard

MIN_PASSWORD_LENGTH = 6

def _seed_account(auth_guard, email, password, role):
    if auth_guard.accounts.get_by_email(email):
        click.echo(f"Account already exists: {email}")
        return
    result = auth_guard.create_account(email, password, role)
    if result.ok:
        auth_guard.log_activity(None, f"SEED:{result.value.id}")
        click.echo(f"{role} account created: {email}")

@click.command('init-db')
@click.option('--admin-email', default='admin@example.com', show_default=True)
@click.option('--admin-password', default='admin123', show_default=True)
@click.option('--user-email', default='user@example.com', show_default=True)
@click.option('--user-password', default='user123', show_default=True)
@with_appcontext
def init_db_command(admin_email, admin_password, user_email, user_password):
    """Create tables and seed an administrator and a regular account."""
    db.create_all()
    auth_guard = AuthGuard.from_config(db.session, current_app.config)
    _seed_account(auth_guard, admin_email, admin_password, ROLE_ADMINISTRATOR)
    _seed_account(auth_guard, user_email, user_password, ROLE_USER)
    click.echo("Database initialization complete")

@click.command('reset-password')
@click.argument('email')
@click.argument('password')
@with_appcontext
def reset_password_command(email, password):
    """Reset the password of EMAIL and lift any lockout."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise click.ClickException(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    auth_guard = AuthGuard.from_config(db.session, current_app.config)
    result = auth_guard.reset_password(email, password)
    if not result.ok:
        raise click.ClickException(f"User with email {email} not found")
    click.echo(f"Password reset successfully for {email}")

def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(reset_password_command)
