"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Transcript rendering and scrolling
- Image history listing
"""

from rich.text import Text
from textual.containers import VerticalScroll
from textual.widgets import Label, ListItem, ListView, Static

from ..chat import Message, Role

ROLE_STYLES = {
    Role.ASSISTANT: "bold green",
    Role.USER: "bold yellow",
    Role.SYSTEM: "bold magenta",
}


class MessageView(Static):
    """One transcript entry: capitalized role followed by the content."""

    def __init__(self, message: Message, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.message = message
        self.add_class(f"-{message.role.value}")

    def render(self) -> Text:
        return Text.assemble(
            (f"{self.message.role.value.capitalize()}: ", ROLE_STYLES[self.message.role]),
            self.message.content,
        )


class ChatLog(VerticalScroll):
    """Scrollable transcript.

    Only messages not yet on screen are mounted; if the transcript no longer
    starts with what is displayed, the log is rebuilt.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._shown_ids: tuple[str, ...] = ()

    def show_transcript(self, transcript: tuple[Message, ...]) -> None:
        ids = tuple(msg.id for msg in transcript)
        if ids[:len(self._shown_ids)] != self._shown_ids:
            self.remove_children()
            self._shown_ids = ()

        new_messages = transcript[len(self._shown_ids):]
        if new_messages:
            self.mount_all(MessageView(msg) for msg in new_messages)
            self.scroll_end(animate=False)
        self._shown_ids = ids

    @property
    def shown_count(self) -> int:
        return len(self._shown_ids)


class CurrentImage(Static):
    """The image on display, shown as a clickable link."""

    def show_reference(self, reference: str | None) -> None:
        if reference is None:
            self.update(Text("No image generated yet", style="dim"))
        else:
            self.update(Text(reference, style=f"link {reference}"))


class ImageHistoryList(ListView):
    """Most-recent-first list of generated images; selecting one displays it."""

    def show_history(self, history: tuple[str, ...]) -> None:
        shown = tuple(item.name for item in self.query(ListItem))
        if shown == history:
            return
        self.clear()
        self.extend(ListItem(Label(reference), name=reference) for reference in history)
