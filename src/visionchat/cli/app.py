"""Main CLI application using Typer."""
import asyncio
import logging
from enum import Enum

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..chat import ChatModel, ConversationClient, Message, Role
from ..errors import InputValidationError, VisionChatError
from ..images import ImageGenerationClient, ImageModel
from .providers import get_gateway, get_settings

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="visionchat",
    help="Chat and image generation against a generative-AI backend",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

EXIT_WORDS = ("exit", "quit", "q", "/quit")


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def configure_logging(level: LogLevel) -> None:
    """Route visionchat logs to stderr through Rich."""
    logging.basicConfig(
        level=level.value.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))


@app.callback()
def main_callback(
    log_level: LogLevel = typer.Option(
        LogLevel.WARNING,
        "--log-level",
        "-l",
        help="Log level: debug, info, warning, or error"
    )
):
    """Chat and image generation against a generative-AI backend."""
    configure_logging(log_level)


def print_message(message: Message) -> None:
    color = "green" if message.role is Role.ASSISTANT else "yellow"
    console.print(f"[bold {color}]{message.role.value.capitalize()}:[/bold {color}] ", end="")
    console.print(message.content, markup=False, highlight=False)


@app.command()
def chat(
    model: ChatModel | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Chat model (default: VISIONCHAT_CHAT_MODEL)"
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Echo locally instead of calling the backend"
    )
):
    """Interactive chat session."""
    async def _chat():
        settings = get_settings(console, chat_model=model)
        async with get_gateway(settings, offline) as gateway:
            client = ConversationClient.from_settings(gateway, settings)

            try:
                with console.status("[dim]Connecting...[/dim]"):
                    greeting = await client.initialize()
            except VisionChatError as e:
                console.print(f"[red]Error: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)

            console.print("[bold cyan]Visionchat[/bold cyan]")
            console.print("[dim]Commands: /model <name>, /history, /quit[/dim]\n")
            print_message(greeting)

            while True:
                try:
                    user_input = console.input(f"[bold yellow]You[/bold yellow] [dim]({client.state.model.value})[/dim]: ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                text = user_input.strip()
                if not text:
                    continue
                if text.lower() in EXIT_WORDS:
                    console.print("[dim]Goodbye![/dim]")
                    break
                if text == "/history":
                    for message in client.transcript:
                        print_message(message)
                    continue
                if text == "/model" or text.startswith("/model "):
                    try:
                        client.select_model(text.removeprefix("/model").strip())
                        console.print(f"[dim]Model set to {client.state.model.value}[/dim]")
                    except InputValidationError as e:
                        console.print(f"[red]{escape(str(e))}[/red]")
                    continue

                try:
                    with console.status("[dim]Thinking...[/dim]"):
                        reply = await client.send_message(user_input)
                except VisionChatError as e:
                    console.print(f"[red]Error: {escape(str(e))}[/red]")
                    continue
                print_message(reply)

    asyncio.run(_chat())


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send after the greeting"),
    model: ChatModel | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Chat model (default: VISIONCHAT_CHAT_MODEL)"
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Echo locally instead of calling the backend"
    )
):
    """Send a single message and print the reply."""
    async def _ask():
        settings = get_settings(console, chat_model=model)
        async with get_gateway(settings, offline) as gateway:
            client = ConversationClient.from_settings(gateway, settings)
            try:
                await client.initialize()
                reply = await client.send_message(message)
            except VisionChatError as e:
                console.print(f"[red]Error: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)
            console.print(reply.content, markup=False, highlight=False)

    asyncio.run(_ask())


@app.command()
def image(
    prompt: str = typer.Argument(..., help="Prompt for the image generator"),
    model: ImageModel | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Image model (default: VISIONCHAT_IMAGE_MODEL)"
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Answer locally instead of calling the backend"
    )
):
    """Generate an image and print its URL."""
    async def _image():
        settings = get_settings(console, image_model=model)
        async with get_gateway(settings, offline) as gateway:
            client = ImageGenerationClient.from_settings(gateway, settings)
            try:
                with console.status("[dim]Generating...[/dim]"):
                    reference = await client.generate(prompt)
            except VisionChatError as e:
                console.print(f"[red]Error: {escape(str(e))}[/red]")
                raise typer.Exit(code=1)
            console.print(reference, markup=False, highlight=False, soft_wrap=True)

    asyncio.run(_image())


@app.command(name="tui")
def tui_command(
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Echo locally instead of calling the backend"
    )
):
    """Launch the two-tab terminal interface."""
    async def _tui():
        from ..ui import run_textual_tui

        settings = get_settings(console)
        async with get_gateway(settings, offline) as gateway:
            await run_textual_tui(gateway, settings)
        console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


@app.command(name="config")
def config_command():
    """Show the effective configuration."""
    settings = get_settings(console)

    table = Table(title="Visionchat Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for name, value in settings.model_dump(mode="json").items():
        table.add_row(name, "unbounded" if value is None else str(value))

    console.print(table)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
