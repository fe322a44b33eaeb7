"""
Flask CLI commands:

    flask --app api seed-users
"""
import click
from flask import current_app

from models import storage
from models.user import UserRole
from services import build_services

SEED_PASSWORD = "Password123!"

SEED_USERS = (
    {"email": "admin@example.com", "first_name": "Admin", "last_name": "User", "role": UserRole.ADMIN},
    {"email": "user@example.com", "first_name": "Regular", "last_name": "User", "role": UserRole.USER},
)


def seed_users(services) -> int:
    """Create the demo accounts that do not exist yet; returns how many were created."""
    created = 0
    for account in SEED_USERS:
        if services.accounts.email_taken(account["email"]):
            continue
        services.users.create({**account, "password": SEED_PASSWORD})
        created += 1
    return created


def register_commands(app):
    @app.cli.command("seed-users")
    def seed_users_command():
        """Seed an admin and a regular user."""
        created = seed_users(build_services(storage, current_app.config))
        click.echo(f"Created {created} user(s)")
