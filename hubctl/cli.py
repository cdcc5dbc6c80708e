"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from hubctl.api import Client
from hubctl.core.config import load_config
from hubctl.core.dispatcher import INTENTS
from hubctl.core.errors import HubctlError
from hubctl.sensors.soil_moisture import parse_description

app = typer.Typer(help="Control an LG webOS TV and decode Zigbee soil sensor reports")

_options: dict[str, Path | None] = {"config": None}


@app.callback()
def main(
    config: Path | None = typer.Option(None, "--config", help="Path to the YAML config file"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    _options["config"] = config
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _build_client() -> Client:
    return Client(load_config(_options["config"]))


@app.command("pair")
def pair(
    timeout: float = typer.Option(60.0, "--timeout", help="Seconds to wait for the TV to accept"),
) -> None:
    """Register with the TV and store the issued client key."""
    client: Client | None = None
    try:
        client = _build_client()
        typer.echo(f"Connecting to {client.config.endpoint.host}; accept the prompt on the TV if shown")
        client.connect(timeout_s=timeout)
        typer.echo(f"Paired with {client.config.name} ({client.config.endpoint.host})")
        typer.echo(f"client-key={client.credential}")
    except HubctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    finally:
        if client is not None:
            client.close()


@app.command("send")
def send(
    command: str,
    value: str | None = typer.Argument(None),
    timeout: float = typer.Option(15.0, "--timeout", help="Seconds to wait for pairing"),
) -> None:
    """Send one command to the TV. Use 'hubctl commands' to list them."""
    client: Client | None = None
    try:
        client = _build_client()
        client.connect(timeout_s=timeout)
        result = client.send(command, value)
        typer.echo(f"Sent {result.uri} id={result.correlation_id}")
        for name, attr_value in sorted(client.attributes.items()):
            typer.echo(f"  {name}: {attr_value}")
    except HubctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    finally:
        if client is not None:
            client.close()


@app.command("commands")
def list_commands() -> None:
    """List the commands accepted by 'hubctl send'."""
    for name, intent in sorted(INTENTS.items()):
        usage = f"{name} {intent.argument}" if intent.argument else name
        typer.echo(f"{usage}: {intent.help}")


@app.command("wake")
def wake() -> None:
    """Broadcast a Wake-on-LAN packet to the configured TV."""
    try:
        client = _build_client()
        hardware_id = client.wake()
        typer.echo(f"Wake packet sent to {hardware_id}")
    except HubctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("sensor")
def sensor(
    description: str,
    fahrenheit: bool = typer.Option(False, "--fahrenheit", help="Report temperature in F"),
) -> None:
    """Decode a soil moisture sensor attribute report line."""
    try:
        event = parse_description(description, temperature_scale="F" if fahrenheit else "C")
    except HubctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    if event is None:
        typer.echo("Unsupported cluster/attribute")
        raise typer.Exit(code=1)
    typer.echo(f"{event.name}: {event.value} {event.unit}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
