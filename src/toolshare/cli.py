"""Command-line interface for toolshare.

Built with Typer for commands and Rich for beautiful output.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .db.schemas import TransactionStatus
from .db.store import build_store
from .lending import LendingManager, OperationResult

# Create the main app
app = typer.Typer(
    name="toolshare",
    help="Lend and borrow tools between neighbours.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
user_app = typer.Typer(help="Manage user profiles.")
app.add_typer(user_app, name="user")
tool_app = typer.Typer(help="Manage tool listings.")
app.add_typer(tool_app, name="tool")
tx_app = typer.Typer(help="Inspect and manage borrowing transactions.")
app.add_typer(tx_app, name="tx")

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def get_manager() -> LendingManager:
    """Build a manager on the configured store."""
    return LendingManager(build_store(get_config()))


def unwrap(result: OperationResult):
    """Return the result data, or print the error and exit with code 1."""
    if not result.success:
        print_error(result.error)
        raise typer.Exit(1)
    return result.data


def format_tool_table(tools: list, title: str = "Tools") -> Table:
    """Create a rich table for displaying tools."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan", max_width=30)
    table.add_column("Condition", style="green")
    table.add_column("Owner", style="dim", no_wrap=True)
    table.add_column("Status")

    for tool in tools:
        status = "[green]available[/green]" if tool.availability else "[yellow]lent out[/yellow]"
        table.add_row(tool.tool_id, tool.tool_name, tool.condition, tool.owner_id, status)

    return table


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show log output"),
) -> None:
    """Configure logging before any command runs."""
    config = get_config()
    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        raise typer.Exit(1)

    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ============================================================================
# User Commands
# ============================================================================


@user_app.command("add")
def user_add(
    username: str = typer.Argument(..., help="Display name"),
    contact: str = typer.Argument(..., help="Contact information (email, phone, ...)"),
) -> None:
    """Register a new user."""
    user_id = unwrap(get_manager().create_user(username, contact))
    print_success(f"Added user: {username}")
    console.print(f"ID: {user_id}")


@user_app.command("show")
def user_show(user_id: str = typer.Argument(..., help="User ID")) -> None:
    """Show a user profile."""
    user = unwrap(get_manager().get_user(user_id))

    lines = [
        f"[bold]{user.username}[/bold]",
        f"Contact: {user.contact_info}",
        f"Tools owned: {len(user.tools_owned)}",
        f"Tools borrowed: {len(user.tools_borrowed)}",
    ]
    for tool_id in user.tools_borrowed:
        lines.append(f"  borrowing {tool_id}")
    console.print(Panel("\n".join(lines), title=user.user_id))


@user_app.command("list")
def user_list() -> None:
    """List all users."""
    users = unwrap(get_manager().list_users())

    if not users:
        console.print("[dim]No users found[/dim]")
        return

    table = Table(title="Users", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Username", style="cyan")
    table.add_column("Contact")
    table.add_column("Owned", justify="right")
    table.add_column("Borrowed", justify="right")

    for user in users:
        table.add_row(
            user.user_id,
            user.username,
            user.contact_info,
            str(len(user.tools_owned)),
            str(len(user.tools_borrowed)),
        )

    console.print(table)


@user_app.command("update")
def user_update(
    user_id: str = typer.Argument(..., help="User ID"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="New display name"),
    contact: Optional[str] = typer.Option(None, "--contact", "-c", help="New contact information"),
) -> None:
    """Update a user profile."""
    payload = {}
    if username is not None:
        payload["username"] = username
    if contact is not None:
        payload["contact_info"] = contact

    if not payload:
        print_info("Nothing to update")
        return

    user = unwrap(get_manager().update_user(user_id, payload))
    print_success(f"Updated user: {user.username}")


@user_app.command("delete")
def user_delete(
    user_id: str = typer.Argument(..., help="User ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a user and the tools they list."""
    if not yes and not typer.confirm(f"Delete user {user_id} and their tools?"):
        raise typer.Abort()

    unwrap(get_manager().delete_user(user_id))
    print_success(f"Deleted user {user_id}")


# ============================================================================
# Tool Commands
# ============================================================================


@tool_app.command("add")
def tool_add(
    owner_id: str = typer.Argument(..., help="Owner user ID"),
    name: str = typer.Option(..., "--name", "-n", help="Tool name"),
    description: str = typer.Option(..., "--description", "-d", help="Description"),
    condition: str = typer.Option("good", "--condition", "-c", help="Condition"),
) -> None:
    """List a tool for lending."""
    tool_id = unwrap(get_manager().create_tool(owner_id, name, description, condition))
    print_success(f"Added tool: {name}")
    console.print(f"ID: {tool_id}")


@tool_app.command("show")
def tool_show(tool_id: str = typer.Argument(..., help="Tool ID")) -> None:
    """Show a tool listing."""
    tool = unwrap(get_manager().get_tool(tool_id))
    status = "[green]available[/green]" if tool.availability else "[yellow]lent out[/yellow]"

    console.print(Panel(
        f"[bold]{tool.tool_name}[/bold]\n"
        f"{tool.description}\n\n"
        f"Condition: {tool.condition}\n"
        f"Owner: {tool.owner_id}\n"
        f"Status: {status}",
        title=tool.tool_id,
    ))


@tool_app.command("list")
def tool_list(
    owner_id: Optional[str] = typer.Option(None, "--owner", "-o", help="Only tools of this owner"),
) -> None:
    """List tool listings."""
    tools = unwrap(get_manager().list_tools(owner_id=owner_id))

    if not tools:
        console.print("[dim]No tools found[/dim]")
        return

    console.print(format_tool_table(tools))


@tool_app.command("available")
def tool_available() -> None:
    """List tools that can be borrowed now."""
    tools = unwrap(get_manager().view_available_tools())

    if not tools:
        console.print("[dim]No tools available[/dim]")
        return

    console.print(format_tool_table(tools, title="Available Tools"))


@tool_app.command("update")
def tool_update(
    tool_id: str = typer.Argument(..., help="Tool ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New tool name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    condition: Optional[str] = typer.Option(None, "--condition", "-c", help="New condition"),
) -> None:
    """Update a tool listing."""
    payload = {}
    if name is not None:
        payload["tool_name"] = name
    if description is not None:
        payload["description"] = description
    if condition is not None:
        payload["condition"] = condition

    if not payload:
        print_info("Nothing to update")
        return

    tool = unwrap(get_manager().update_tool(tool_id, payload))
    print_success(f"Updated tool: {tool.tool_name}")


@tool_app.command("delete")
def tool_delete(
    tool_id: str = typer.Argument(..., help="Tool ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a tool listing."""
    if not yes and not typer.confirm(f"Delete tool {tool_id}?"):
        raise typer.Abort()

    unwrap(get_manager().delete_tool(tool_id))
    print_success(f"Deleted tool {tool_id}")


# ============================================================================
# Borrowing Commands
# ============================================================================


@app.command()
def borrow(
    borrower_id: str = typer.Argument(..., help="Borrower user ID"),
    tool_id: str = typer.Argument(..., help="Tool ID to borrow"),
) -> None:
    """Borrow a tool."""
    transaction_id = unwrap(get_manager().create_transaction(borrower_id, tool_id))
    print_success("Tool borrowed")
    console.print(f"ID: {transaction_id}")


@app.command("return")
def return_(
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
) -> None:
    """Return a borrowed tool."""
    message = unwrap(get_manager().return_tool(transaction_id))
    print_success(message)


@tx_app.command("show")
def tx_show(transaction_id: str = typer.Argument(..., help="Transaction ID")) -> None:
    """Show a borrowing transaction."""
    tx = unwrap(get_manager().get_transaction(transaction_id))

    console.print(Panel(
        f"Tool: {tx.tool_id}\n"
        f"Borrower: {tx.borrower_id}\n"
        f"Borrowed: {tx.borrow_date.isoformat()}\n"
        f"Returned: {tx.return_date.isoformat() if tx.return_date else '-'}\n"
        f"Status: {tx.status.value}",
        title=tx.transaction_id,
    ))


@tx_app.command("list")
def tx_list(
    status: Optional[TransactionStatus] = typer.Option(None, "--status", "-s", help="Filter by status"),
    tool_id: Optional[str] = typer.Option(None, "--tool", "-t", help="Filter by tool"),
    borrower_id: Optional[str] = typer.Option(None, "--borrower", "-b", help="Filter by borrower"),
) -> None:
    """List borrowing transactions."""
    transactions = unwrap(
        get_manager().list_transactions(status=status, tool_id=tool_id, borrower_id=borrower_id)
    )

    if not transactions:
        console.print("[dim]No transactions found[/dim]")
        return

    table = Table(title="Transactions", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Tool", no_wrap=True)
    table.add_column("Borrower", no_wrap=True)
    table.add_column("Borrowed")
    table.add_column("Status")

    for tx in transactions:
        if tx.status == TransactionStatus.RETURNED:
            status_str = "[dim]returned[/dim]"
        else:
            status_str = f"[green]{tx.status.value}[/green]"
        table.add_row(
            tx.transaction_id,
            tx.tool_id,
            tx.borrower_id,
            tx.borrow_date.date().isoformat(),
            status_str,
        )

    console.print(table)


@tx_app.command("approve")
def tx_approve(transaction_id: str = typer.Argument(..., help="Transaction ID")) -> None:
    """Mark a pending transaction as approved."""
    unwrap(get_manager().update_transaction(transaction_id, {"status": TransactionStatus.APPROVED}))
    print_success("Transaction approved")


@tx_app.command("delete")
def tx_delete(transaction_id: str = typer.Argument(..., help="Transaction ID")) -> None:
    """Delete a returned transaction."""
    unwrap(get_manager().delete_transaction(transaction_id))
    print_success(f"Deleted transaction {transaction_id}")


# ============================================================================
# Statistics
# ============================================================================


@app.command()
def stats() -> None:
    """Show lending statistics."""
    s = unwrap(get_manager().lending_stats())

    console.print(Panel(
        f"Users: {s.total_users}\n"
        f"Tools: {s.total_tools} ({s.available_tools} available, {s.lent_tools} lent out)\n"
        f"Transactions: {s.active_transactions} active, {s.returned_transactions} returned",
        title="Lending Statistics",
    ))


# ============================================================================
# Version Command
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"toolshare version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
