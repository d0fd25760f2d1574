"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Two tabs, each a single column: content on top, controls at the bottom.
"""

APP_CSS = """
Screen {
    background: $background;
}

TabbedContent {
    height: 1fr;
}

TabPane {
    padding: 0 1;
}

/* ============================================
   Chat Tab
   ============================================ */
#chat-log {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    padding: 0 1;
    scrollbar-gutter: stable;
}

MessageView {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
}

#chat-status {
    height: auto;
    color: $error;
    display: none;

    &.-visible {
        display: block;
    }
}

#chat-input-row {
    height: auto;
    margin-top: 1;
}

#chat-input {
    width: 1fr;
}

#send-btn {
    min-width: 10;
    margin-left: 1;
}

#chat-model {
    width: 30;
    margin-top: 1;
}

/* ============================================
   Images Tab
   ============================================ */
#prompt {
    height: 6;
    border: round $primary 60%;

    &:focus {
        border: round $primary;
    }
}

#image-controls {
    height: auto;
    margin-top: 1;
}

#generate-btn {
    width: 1fr;
}

#image-model {
    width: 30;
    margin-left: 1;
}

#current-image {
    height: auto;
    margin-top: 1;
    padding: 0 1;
    border: round $accent 60%;
    border-title-color: $accent;
}

#history-box {
    height: 1fr;
    margin-top: 1;
    border: round $secondary 60%;
    border-title-color: $secondary;

    &.-empty {
        display: none;
    }
}

#history-header {
    height: auto;
}

#history-title {
    width: 1fr;
    text-style: bold;
    padding: 0 1;
}

#clear-history-btn {
    min-width: 16;
}

#image-history {
    height: 1fr;
    background: transparent;
}
"""
