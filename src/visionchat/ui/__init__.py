"""Terminal UI module for visionchat.

Provides a Textual-based TUI with a Chat tab and an Images tab.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (transcript log, image history list)
- styles.py: CSS styling (layout decisions)
- app.py: Application orchestration (user interaction flow)
"""

from .app import VisionChatApp, run_textual_tui
from .widgets import ChatLog, CurrentImage, ImageHistoryList, MessageView

__all__ = [
    "ChatLog",
    "CurrentImage",
    "ImageHistoryList",
    "MessageView",
    "VisionChatApp",
    "run_textual_tui",
]
