"""
Albedo intent CLI — `albedo` command.

Commands:
  albedo intents                   List requestable intents
  albedo request <intent> -p k=v   Any intent by name
  albedo public-key                Request account public key
  albedo sign-message <message>    Request message signing
  albedo implicit-flow <intents>   Request implicit session permissions
  albedo link <uri>                Handle a web+stellar: link
  albedo sessions <cmd>            Implicit session cache
  albedo config <cmd>              CLI settings
"""

import asyncio
import json
from pathlib import Path
from typing import Any

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install albedo-intent[cli]")

from albedo_intent.client import AsyncAlbedo, DEFAULT_FRONTEND_URL
from albedo_intent.errors import AlbedoError
from albedo_intent.session_store import DEFAULT_SESSIONS_FILE, JsonFileSessionStorage, SessionStore

console = Console()
CONFIG_FILE = Path.home() / ".albedo" / "config.json"
CONFIG_KEYS = ("frontend_url", "relay_url", "bridge_url", "sessions_file")


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_store() -> SessionStore:
    cfg = _load_config()
    path = Path(cfg["sessions_file"]).expanduser() if cfg.get("sessions_file") else DEFAULT_SESSIONS_FILE
    return SessionStore(JsonFileSessionStorage(path))


def _get_client() -> AsyncAlbedo:
    cfg = _load_config()
    options: dict[str, Any] = {}
    if cfg.get("relay_url"):
        options["relay_url"] = cfg["relay_url"]
    if "bridge_url" in cfg:
        options["bridge_url"] = cfg["bridge_url"] or None
    return AsyncAlbedo(
        frontend_url=cfg.get("frontend_url", DEFAULT_FRONTEND_URL),
        store=_get_store(),
        **options,
    )


def _run(coro):
    try:
        return asyncio.run(coro)
    except AlbedoError as e:
        console.print(f"[red]{e.code}: {e}[/red]")
        raise SystemExit(1)


def _print_result(result: dict, json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps(result, indent=2))
        return
    console.print(f"[green]{result.get('intent', 'intent')} confirmed[/green]")
    for key, value in result.items():
        if key != "intent":
            console.print(f"  [bold]{key}[/bold]: {value}")


@click.group()
@click.version_option("0.1.0")
def main():
    """Albedo intent CLI — request user-confirmed Stellar actions."""


@main.group("config")
def config():
    """CLI settings."""


@config.command("show")
def config_show():
    """Print current settings."""
    click.echo(json.dumps(_load_config(), indent=2))


@config.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def config_set(key: str, value: str):
    """Set a setting (empty value for bridge_url disables the extension)."""
    _save_config({**_load_config(), key: value})
    console.print(f"[green]{key} saved to {CONFIG_FILE}[/green]")


# Register subcommands from separate modules
from albedo_intent.cli.intents import intents_cmd, request_cmd, public_key_cmd, sign_message_cmd, implicit_flow_cmd, link_cmd
from albedo_intent.cli.sessions import sessions

main.add_command(intents_cmd)
main.add_command(request_cmd)
main.add_command(public_key_cmd)
main.add_command(sign_message_cmd)
main.add_command(implicit_flow_cmd)
main.add_command(link_cmd)
main.add_command(sessions)


if __name__ == "__main__":
    main()
