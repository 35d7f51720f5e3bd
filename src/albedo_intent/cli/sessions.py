"""CLI: albedo sessions list|check|forget"""

import json
from datetime import datetime

import click
from rich.console import Console
from rich.table import Table

console = Console()


def _get_store():
    from albedo_intent.cli.main import _get_store
    return _get_store()


def _format_expiry(valid_until: int) -> str:
    return datetime.fromtimestamp(valid_until / 1000).isoformat(timespec="seconds")


@click.group()
def sessions():
    """Implicit session cache."""


@sessions.command("list")
@click.option("--all", "include_expired", is_flag=True, help="Include expired sessions")
@click.option("--json-output", "--json", is_flag=True)
def sessions_list(include_expired, json_output):
    """List cached implicit sessions."""
    store = _get_store()
    items = store.list_all() if include_expired else store.list_active()
    if json_output:
        click.echo(json.dumps([s.model_dump() for s in items], indent=2))
        return
    table = Table(title=f"Implicit sessions ({len(items)})")
    table.add_column("Pubkey", style="bold")
    table.add_column("Grants")
    table.add_column("Valid until")
    for s in items:
        table.add_row(s.pubkey, ", ".join(s.grants), _format_expiry(s.valid_until))
    console.print(table)


@sessions.command("check")
@click.argument("intent")
@click.argument("pubkey")
def sessions_check(intent, pubkey):
    """Check whether INTENT can run without confirmation for PUBKEY."""
    if _get_store().get(intent, pubkey) is not None:
        console.print(f"[green]{intent} allowed for {pubkey}[/green]")
    else:
        console.print(f"[yellow]No active implicit session grants {intent} for {pubkey}[/yellow]")
        raise SystemExit(1)


@sessions.command("forget")
@click.argument("pubkey")
def sessions_forget(pubkey):
    """Revoke the cached session for PUBKEY."""
    _get_store().forget(pubkey)
    console.print(f"[green]Session for {pubkey} forgotten.[/green]")
