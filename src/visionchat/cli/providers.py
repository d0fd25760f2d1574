"""Settings and gateway factory functions for the CLI.

Centralizes creation of settings and gateways from environment variables.
Hides configuration details from command implementations.
"""

import itertools
from collections.abc import Mapping
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from ..config import ClientSettings, load_settings
from ..errors import ConfigurationError
from ..transport import CHAT_PATH, TransportGateway, create_transport_gateway

# Default console for output
_console = Console()

OFFLINE_GREETING = "Hello! I'm running offline. Everything you send is echoed back."


def get_settings(console: Console | None = None, **overrides: Any) -> ClientSettings:
    """Load settings from the environment, exiting on invalid values.

    Args:
        console: Optional Rich console for output
        **overrides: Values from command-line options (None means not given)

    Returns:
        Validated settings

    Raises:
        typer.Exit: If a setting is invalid
    """
    con = console or _console
    try:
        return load_settings(**overrides)
    except ConfigurationError as e:
        con.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _offline_replies():
    counter = itertools.count(1)

    def reply(path: str, body: Mapping[str, Any]) -> str:
        if path == CHAT_PATH:
            messages = body.get("messages", [])
            if len(messages) == 1 and messages[0].get("role") == "system":
                return OFFLINE_GREETING
            return f"You said: {messages[-1]['content']}" if messages else ""
        return f"https://images.invalid/offline/{next(counter)}.png"

    return reply


def get_gateway(settings: ClientSettings, offline: bool = False) -> TransportGateway:
    """Create the gateway for the configured backend.

    Args:
        settings: Effective settings
        offline: Answer locally with an echo gateway instead of calling the backend

    Returns:
        Gateway instance (caller closes it)
    """
    if offline:
        return create_transport_gateway("scripted", fallback=_offline_replies())

    return create_transport_gateway(
        "http",
        base_url=settings.base_url,
        timeout=settings.timeout,
        strict_status=settings.strict_status,
    )
