import logging
import subprocess

import click

from resume_builder.app.api.routes.route_logic.user_crud import create_user as create_user_db
from resume_builder.app.database.database import get_session_local

log = logging.getLogger(__name__)


@click.group()
def cli():
    """Management script for the Resume Builder application."""
    pass


def _run_alembic(arguments: list[str], action: str) -> bool:
    """
    Run an alembic subcommand and report the outcome on the console.

    Args:
        arguments (list[str]): Arguments passed after `alembic`.
        action (str): Description of the work, used in error messages.

    Returns:
        bool: True if alembic exited successfully.

    Notes:
        1. A non-zero exit and a missing `alembic` executable are both reported
           on stderr and logged; neither is raised.

    """
    command = ["alembic", *arguments]
    _msg = f"Running {' '.join(command)}"
    log.debug(_msg)
    try:
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError as e:
        _error_msg = f"An error occurred while {action}: {e}"
        click.echo(_error_msg, err=True)
        log.exception(_error_msg)
        return False
    except FileNotFoundError:
        _error_msg = "Error: 'alembic' command not found. Make sure Alembic is installed and in your PATH."
        click.echo(_error_msg, err=True)
        log.exception(_error_msg)
        return False
    return True


@cli.command("generate-migration")
@click.option(
    "-m",
    "--message",
    required=True,
    help="A short message describing the migration.",
)
def generate_migration(message: str):
    """
    Autogenerate a migration from the current models.

    Args:
        message (str): A short message describing the migration.

    """
    click.echo("Generating new migration...")
    if _run_alembic(["revision", "--autogenerate", "-m", message], "generating migration"):
        _success_msg = f"Successfully generated new migration: {message}"
        click.echo(_success_msg)
        log.info(_success_msg)


@cli.command("apply-migrations")
def apply_migrations():
    """Upgrade the database to the latest migration."""
    click.echo("Applying database migrations...")
    if _run_alembic(["upgrade", "head"], "applying migrations"):
        _success_msg = "Successfully applied all migrations."
        click.echo(_success_msg)
        log.info(_success_msg)


@cli.command("create-user")
@click.option("--email", required=True, help="Login email for the account.")
@click.option(
    "--password",
    required=True,
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password for the account.",
)
@click.option("--first-name", default=None, help="Given name.")
@click.option("--last-name", default=None, help="Family name.")
def create_user(email: str, password: str, first_name: str | None, last_name: str | None):
    """
    Create a local account that can sign in with email and password.

    Args:
        email (str): Login email; must not already be registered.
        password (str): Plain text password, stored as a bcrypt hash.
        first_name (str | None): Given name.
        last_name (str | None): Family name.

    Notes:
        1. Opens a database session.
        2. Calls `create_user` from the user route logic.
        3. Reports success, or the error when the email is taken or the database fails.

    """
    click.echo(f"Creating user '{email}'...")

    db_session_local = get_session_local()
    db = db_session_local()
    try:
        user = create_user_db(
            db=db,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
        )
        _success_msg = f"User '{user.email}' created with id {user.id}."
        click.echo(_success_msg)
        log.info(_success_msg)
    except Exception as e:
        db.rollback()
        _error_msg = f"Error creating user: {e}"
        click.echo(_error_msg, err=True)
        log.exception(_error_msg)
    finally:
        db.close()


def main():
    """Run the command line interface."""
    cli()


if __name__ == "__main__":
    main()
