import getpass
import re
import typer

from cli.core.session import (
    save_token,
    load_token,
    clear_token,
    is_logged_in,
    save_client_token,
    load_client_token,
    read_client_user,
)
from cli.core.api import (
    api_admin_login,
    api_admin_logout,
    api_admin_verify,
    api_client_auth,
    api_client_stores,
)


app = typer.Typer(help="Authentication commands (admin login/logout, staff tokens)")

USERNAME_REGEX = re.compile(r"^[a-zA-Z0-9_.-]{1,64}$")


@app.command("login")
def login(
    username: str = typer.Option(None, "--username", "-u", help="Admin username"),
):
    """
    Admin login. Only allowed if no session is active.
    """
    if is_logged_in():
        typer.echo("Session already active. Logout first to remove current session token.")
        raise typer.Exit(code=1)

    if username is None:
        username = typer.prompt("Username")

    if not USERNAME_REGEX.match(username):
        typer.echo("Invalid username. Use only letters, numbers, '.', '_' or '-'.")
        raise typer.Exit(code=1)

    password = getpass.getpass("Password: ")
    if not password:
        typer.echo("Password cannot be empty.")
        raise typer.Exit(code=1)

    token = api_admin_login(username, password)
    if token is None:
        typer.echo("Login failed (invalid credentials or API error).")
        raise typer.Exit(code=1)

    save_token(token)
    typer.echo(f"Login successful as '{username}'.")


@app.command("verify")
def verify():
    """
    Check that the stored admin session is still live.
    """
    token = load_token()
    if not token:
        typer.echo("No active session.")
        raise typer.Exit(code=1)

    if not api_admin_verify(token):
        typer.echo("Session is invalid or expired.")
        raise typer.Exit(code=1)

    typer.echo("Session is valid.")


@app.command("logout")
def logout():
    """
    End session and delete local tokens.
    """
    token = load_token()
    if token:
        if api_admin_logout(token):
            typer.echo("Logged out from backend.")
        else:
            typer.echo("Warning: Failed to logout from backend. The token may have already expired.")

    clear_token()
    typer.echo("Session ended.")


@app.command("client")
def client(tracking_id: str = typer.Argument(..., help="Staff tracking id")):
    """
    Obtain a staff token for a tracking id.
    """
    token = api_client_auth(tracking_id)
    if token is None:
        typer.echo("Unknown tracking id or API error.")
        raise typer.Exit(code=1)

    save_client_token(token)
    user = read_client_user()
    name = user.get("name") if user else tracking_id
    typer.echo(f"Staff token stored for '{name}'.")


@app.command("whoami")
def whoami(
    stores: bool = typer.Option(False, "--stores", help="Also list stores from the backend"),
):
    """
    Show the staff identity carried by the stored token.
    """
    user = read_client_user()
    if user is None:
        typer.echo("No valid staff token.")
        raise typer.Exit(code=1)

    typer.echo(f"{user.get('name')} ({user.get('role')}) id={user.get('id')}")

    if stores:
        result = api_client_stores(load_client_token())
        if result is None:
            typer.echo("Could not fetch stores.")
            raise typer.Exit(code=1)
        for store in result:
            typer.echo(f"  {store['store_id']}  {store['store_name']}")
