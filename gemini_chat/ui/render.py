"""Rich renderables for the terminal chat."""

from datetime import datetime

from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from gemini_chat.models.messages import Message

USER_AVATAR = "👤"
BOT_AVATAR = "🤖"


def format_time(timestamp: datetime) -> str:
    """Format a timestamp as local hour:minute."""
    return timestamp.astimezone().strftime("%I:%M %p")


def _bubble(message: Message) -> Panel:
    return Panel(
        Group(Text(message.text), Text(format_time(message.timestamp), style="dim")),
        border_style="magenta" if message.is_user else "bright_black",
        expand=False,
    )


def render_message(message: Message) -> RenderableType:
    """Render one message: user on the right, bot on the left, each with its avatar."""
    row = Table.grid(padding=(0, 1))
    if message.is_user:
        row.add_row(_bubble(message), Text(USER_AVATAR))
        return Align.right(row)

    row.add_row(Text(BOT_AVATAR), _bubble(message))
    return Align.left(row)


def render_typing_indicator() -> RenderableType:
    """Bot avatar followed by the animated three-dot indicator."""
    row = Table.grid(padding=(0, 1))
    row.add_row(Text(BOT_AVATAR), Spinner("point", style="bright_black"))
    return row


def render_header() -> Panel:
    return Panel.fit(
        "[bold magenta]Gemini Chatbot[/bold magenta]\n"
        "Type your message and press Enter.\n"
        "Commands: /help, /clear, /voice, /download, /quit",
        border_style="magenta",
    )
