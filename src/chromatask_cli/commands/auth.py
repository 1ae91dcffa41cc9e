"""Authentication commands."""

import typer

from chromatask_cli.services.auth_service import AuthService
from chromatask_cli.services.config_service import get_config_service, get_storage_strategy_context
from chromatask_cli.utils.typer_helpers import SuggestingGroup
from chromatask_cli.utils.ui.console import get_console
from chromatask_cli.utils.ui.formatters import format_info, format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Authentication commands")
console = get_console()


@app.command()
@command_wrapper(auth_required=False)
async def login() -> None:
    """Sign in to the active context."""
    context = get_config_service().get_current_context()
    storage = get_storage_strategy_context()
    try:
        auth = AuthService(storage.auth_provider)
        user = await auth.login()
    finally:
        await storage.close()

    if user is None:
        format_info("Sign-in cancelled")
        return
    who = user.display_name or user.email or user.uid
    format_success(f"Logged in as {who} (context: {context.name})")


@app.command()
@command_wrapper(auth_required=False)
async def logout() -> None:
    """Sign out of the active context."""
    storage = get_storage_strategy_context()
    try:
        auth = AuthService(storage.auth_provider)
        if not auth.is_authenticated():
            format_info("Not logged in")
            return
        await auth.logout()
    finally:
        await storage.close()
    format_success("Logged out")


@app.command()
@command_wrapper(auth_required=False)
def status(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show who is signed in to the active context."""
    context = get_config_service().get_current_context()
    user = AuthService(get_storage_strategy_context().auth_provider).current_user()

    if output != "pretty":
        format_output(
            {
                "context": context.name,
                "authenticated": user is not None,
                "user": user.to_document() if user else None,
            },
            output,
        )
        return

    console.print(f"[bold]Context:[/bold] {context.name} ({context.type})")
    if user is None:
        console.print("[yellow]Not logged in[/yellow]")
        return
    console.print(f"[bold]User:[/bold] {user.display_name or '-'}")
    console.print(f"[bold]Email:[/bold] {user.email or '-'}")
    console.print(f"[bold]UID:[/bold] {user.uid}")
