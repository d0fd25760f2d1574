"""Main Textual TUI application.

Owns the display state and delegates user actions (send message, change
model, generate image, clear history) to the two clients. Network calls
run as async workers on the app's own event loop, so every state change
reaches the widgets on the UI context.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    ListView,
    Select,
    Static,
    TabbedContent,
    TabPane,
    TextArea,
)

from ..chat import ChatModel, ConversationClient, ConversationState
from ..config import ClientSettings
from ..images import ImageGenerationClient, ImageModel, ImageState
from ..transport import TransportGateway
from .styles import APP_CSS
from .widgets import ChatLog, CurrentImage, ImageHistoryList


class VisionChatApp(App):
    """Two-tab TUI: Chat and Images."""

    CSS = APP_CSS
    TITLE = "Visionchat"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+g", "generate", "Generate"),
        Binding("ctrl+k", "clear_history", "Clear Images"),
    ]

    def __init__(self, gateway: TransportGateway, settings: ClientSettings) -> None:
        super().__init__()
        self._settings = settings
        self.chat_client = ConversationClient.from_settings(gateway, settings)
        self.image_client = ImageGenerationClient.from_settings(gateway, settings)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with TabbedContent(initial="chat-tab"):
            with TabPane("Chat", id="chat-tab"):
                yield ChatLog(id="chat-log")
                yield Static("", id="chat-status")
                with Horizontal(id="chat-input-row"):
                    yield Input(placeholder="Enter a message", id="chat-input")
                    yield Button("Send", id="send-btn", variant="success", disabled=True)
                yield Select(
                    [(m.value, m) for m in ChatModel],
                    value=self.chat_client.state.model,
                    allow_blank=False,
                    id="chat-model",
                )

            with TabPane("Images", id="images-tab"):
                yield TextArea(id="prompt", show_line_numbers=False)
                with Horizontal(id="image-controls"):
                    yield Button("Generate Image", id="generate-btn", variant="primary", disabled=True)
                    yield Select(
                        [(m.value, m) for m in ImageModel],
                        value=self.image_client.state.model,
                        allow_blank=False,
                        id="image-model",
                    )
                yield CurrentImage(id="current-image")
                with Vertical(id="history-box"):
                    with Horizontal(id="history-header"):
                        yield Static("Image History", id="history-title")
                        yield Button("Clear History", id="clear-history-btn", variant="error")
                    yield ImageHistoryList(id="image-history")

        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.theme = "catppuccin-mocha"
        self.sub_title = self._settings.base_url
        self.query_one("#chat-log", ChatLog).border_title = "Conversation"
        self.query_one("#current-image", CurrentImage).border_title = "Current Image"

        self.chat_client.subscribe(self._render_chat)
        self.image_client.subscribe(self._render_images)
        self._render_chat(self.chat_client.state)
        self._render_images(self.image_client.state)

        self.query_one("#chat-input", Input).focus()
        self._bootstrap()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_chat(self, state: ConversationState) -> None:
        self.query_one("#chat-log", ChatLog).show_transcript(state.transcript)

        chat_input = self.query_one("#chat-input", Input)
        if chat_input.value != state.draft:
            chat_input.value = state.draft

        send = self.query_one("#send-btn", Button)
        send.disabled = state.is_loading or not state.draft.strip()
        send.label = "..." if state.is_loading else "Send"

        status = self.query_one("#chat-status", Static)
        if state.is_error:
            status.update("Could not reach the chat backend. Send a message to try again.")
        elif state.last_error:
            status.update(f"Error: {state.last_error}")
        status.set_class(bool(state.is_error or state.last_error), "-visible")

    def _render_images(self, state: ImageState) -> None:
        prompt = self.query_one("#prompt", TextArea).text
        generate = self.query_one("#generate-btn", Button)
        generate.disabled = state.is_loading or not prompt.strip()
        generate.label = "Generating..." if state.is_loading else "Generate Image"

        self.query_one("#current-image", CurrentImage).show_reference(state.current_image)
        self.query_one("#image-history", ImageHistoryList).show_history(state.history)
        self.query_one("#history-box").set_class(not state.history, "-empty")

    # ------------------------------------------------------------------
    # Chat events
    # ------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "chat-input" and event.value != self.chat_client.state.draft:
            self.chat_client.set_draft(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "chat-input":
            self._submit_chat()

    def _submit_chat(self) -> None:
        state = self.chat_client.state
        if state.is_loading or not state.draft.strip():
            return
        self._send(state.draft)

    @work(group="chat")
    async def _bootstrap(self) -> None:
        try:
            await self.chat_client.initialize()
        except Exception as e:
            self.notify(f"Error: {str(e)[:80]}", severity="error", timeout=5)

    @work(group="chat")
    async def _send(self, text: str) -> None:
        try:
            await self.chat_client.send_message(text)
        except Exception as e:
            self.notify(f"Error: {str(e)[:80]}", severity="error", timeout=5)

    # ------------------------------------------------------------------
    # Image events
    # ------------------------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.id == "prompt":
            self._render_images(self.image_client.state)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if event.item is not None and event.item.name:
            self.image_client.select_image(event.item.name)

    def action_generate(self) -> None:
        """Generate an image from the current prompt."""
        prompt = self.query_one("#prompt", TextArea).text
        if self.image_client.state.is_loading or not prompt.strip():
            return
        self._generate(prompt)

    def action_clear_history(self) -> None:
        """Clear the image history."""
        self.image_client.clear_history()
        self.notify("Image history cleared", timeout=2)

    @work(group="images")
    async def _generate(self, prompt: str) -> None:
        try:
            await self.image_client.generate(prompt)
        except Exception as e:
            self.notify(f"Error: {str(e)[:80]}", severity="error", timeout=5)

    # ------------------------------------------------------------------
    # Shared events
    # ------------------------------------------------------------------

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "send-btn":
            self._submit_chat()
        elif button_id == "generate-btn":
            self.action_generate()
        elif button_id == "clear-history-btn":
            self.action_clear_history()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        if event.select.id == "chat-model":
            self.chat_client.select_model(event.value)
        elif event.select.id == "image-model":
            self.image_client.select_model(event.value)


async def run_textual_tui(gateway: TransportGateway, settings: ClientSettings) -> None:
    """Run the Textual TUI.

    Args:
        gateway: Transport shared by both clients (caller closes it)
        settings: Effective settings
    """
    app = VisionChatApp(gateway, settings)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
