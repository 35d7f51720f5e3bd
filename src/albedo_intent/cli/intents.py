"""CLI: albedo intents|request|public-key|sign-message|implicit-flow|link"""

import json
from contextlib import nullcontext
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from albedo_intent.registry import IntentRegistry

console = Console()


def _get_client():
    from albedo_intent.cli.main import _get_client
    return _get_client()


def _run(coro):
    from albedo_intent.cli.main import _run
    return _run(coro)


def _print_result(result, json_output):
    from albedo_intent.cli.main import _print_result
    _print_result(result, json_output)


def _parse_params(pairs: tuple[str, ...]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--param")
        params[key] = value
    return params


def _waiting(text: str, json_output: bool):
    return nullcontext() if json_output else console.status(text)


async def _send(intent: str, params: dict, json_output: bool) -> None:
    client = _get_client()
    try:
        with _waiting(f"Waiting for {intent} confirmation...", json_output):
            result = await client.request(intent, params)
    finally:
        await client.close()
    _print_result(result, json_output)


@click.command("intents")
@click.option("--json-output", "--json", is_flag=True)
def intents_cmd(json_output: bool):
    """List the intents an application may request."""
    registry = IntentRegistry()
    descriptors = [registry.lookup(name) for name in registry.names()]
    if json_output:
        click.echo(json.dumps([d.model_dump() for d in descriptors], indent=2))
        return
    table = Table(title=f"Intents ({len(descriptors)})")
    table.add_column("Intent", style="bold")
    table.add_column("Title")
    table.add_column("Risk")
    table.add_column("Implicit flow")
    table.add_column("Required")
    for d in descriptors:
        required = ", ".join(k for k, p in d.parameters.items() if p.required)
        table.add_row(d.name, d.title, d.risk, "yes" if d.implicit_flow else "no", required or "-")
    console.print(table)


@click.command("request")
@click.argument("intent")
@click.option("-p", "--param", "params", multiple=True, help="Intent parameter as key=value")
@click.option("--json-output", "--json", is_flag=True)
def request_cmd(intent: str, params: tuple[str, ...], json_output: bool):
    """Request confirmation for any intent."""
    _run(_send(intent, _parse_params(params), json_output))


@click.command("public-key")
@click.option("--token", default=None, help="Verification token (random if omitted)")
@click.option("--json-output", "--json", is_flag=True)
def public_key_cmd(token: Optional[str], json_output: bool):
    """Request the user's account public key."""

    async def _public_key():
        client = _get_client()
        try:
            with _waiting("Waiting for confirmation...", json_output):
                result = await client.public_key(token)
        finally:
            await client.close()
        _print_result(result, json_output)

    _run(_public_key())


@click.command("sign-message")
@click.argument("message")
@click.option("--pubkey", default=None)
@click.option("--json-output", "--json", is_flag=True)
def sign_message_cmd(message: str, pubkey: Optional[str], json_output: bool):
    """Request a signature for a text message."""

    async def _sign():
        client = _get_client()
        try:
            with _waiting("Waiting for confirmation...", json_output):
                result = await client.sign_message(message, pubkey=pubkey)
        finally:
            await client.close()
        _print_result(result, json_output)

    _run(_sign())


@click.command("implicit-flow")
@click.argument("intents", nargs=-1, required=True)
@click.option("--network", default=None)
@click.option("--json-output", "--json", is_flag=True)
def implicit_flow_cmd(intents: tuple[str, ...], network: Optional[str], json_output: bool):
    """Request permission to run INTENTS without confirmation."""

    async def _grant():
        client = _get_client()
        try:
            with _waiting("Waiting for confirmation...", json_output):
                result = await client.implicit_flow(list(intents), network=network)
        finally:
            await client.close()
        _print_result(result, json_output)
        if result.get("granted") and not json_output:
            console.print(f"[dim]Session saved for {result.get('pubkey')}[/dim]")

    _run(_grant())


@click.command("link")
@click.argument("uri")
@click.option("--json-output", "--json", is_flag=True)
def link_cmd(uri: str, json_output: bool):
    """Handle a web+stellar: link."""

    async def _link():
        client = _get_client()
        try:
            with _waiting("Waiting for confirmation...", json_output):
                result = await client.handle_stellar_link(uri)
        finally:
            await client.close()
        _print_result(result, json_output)

    _run(_link())
