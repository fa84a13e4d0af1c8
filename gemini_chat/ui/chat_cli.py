"""Interactive terminal chat with Gemini."""

import asyncio

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.prompt import Prompt

from gemini_chat.models.messages import Message
from gemini_chat.models.session import ChatSession
from gemini_chat.services.dispatcher import ChatDispatcher, SubmissionRejectedError, get_chat_dispatcher
from gemini_chat.services.session_manager import cuid
from gemini_chat.ui.render import render_header, render_message, render_typing_indicator
from gemini_chat.utils.logging import LogConfig, get_logger, setup_logging

logger = get_logger(__name__)

QUIT_COMMANDS = {"/quit", "/exit"}


class ChatCLI:
    """Terminal chat bound to a single conversation session."""

    def __init__(
        self,
        dispatcher: ChatDispatcher | None = None,
        session: ChatSession | None = None,
        console: Console | None = None,
    ):
        """Initialize chat CLI."""
        self.console = console or Console()
        self.session = session or ChatSession(session_id=cuid())
        self.dispatcher = dispatcher or get_chat_dispatcher()
        self.pending_input = ""
        self._typing_indicator: Live | None = None

        self.session.store.subscribe(self._show_message)

    @property
    def can_send(self) -> bool:
        """Whether the send action is enabled."""
        return bool(self.pending_input.strip()) and not self.session.busy

    @property
    def typing(self) -> bool:
        """Whether the typing indicator is on screen."""
        return self._typing_indicator is not None and self._typing_indicator.is_started

    async def send(self) -> Message | None:
        """Submit the pending input while the typing indicator is shown.

        Returns:
            The bot reply, or None when sending is disabled
        """
        if not self.can_send:
            return None

        text = self.pending_input
        self.pending_input = ""

        with Live(render_typing_indicator(), console=self.console, transient=True, refresh_per_second=10) as live:
            self._typing_indicator = live
            try:
                return await self.dispatcher.submit(self.session, text)
            except SubmissionRejectedError:
                self.console.print("[yellow]Still waiting for the previous reply.[/yellow]")
                return None
            finally:
                self._typing_indicator = None

    async def handle_key(self, line: str) -> Message | None:
        """Enter pressed with ``line`` in the input field."""
        self.pending_input = line
        return await self.send()

    def handle_command(self, command: str) -> bool:
        """Run a slash command.

        Returns:
            False when the chat should end
        """
        command = command.strip().lower()
        if command in QUIT_COMMANDS:
            return False
        if command == "/help":
            self._show_help()
        elif command == "/clear":
            self.session.reset()
            self.console.clear()
            self.console.print(render_header())
            self.console.print("[yellow]🔄 Conversation cleared[/yellow]")
        elif command == "/voice":
            self.console.print("[dim]🎤 Voice input is not available.[/dim]")
        elif command == "/download":
            self.console.print("[dim]💾 Chat download is not available.[/dim]")
        else:
            self.console.print(f"[red]Unknown command: {command}[/red] (try /help)")
        return True

    async def run(self) -> None:
        """Read input until the user quits."""
        self.console.print(render_header())

        while True:
            try:
                user_input = await asyncio.to_thread(Prompt.ask, "\n[bold cyan]You[/bold cyan]", console=self.console)
            except EOFError:
                break

            if user_input.strip().startswith("/"):
                if not self.handle_command(user_input):
                    break
                continue

            await self.handle_key(user_input)

    def start(self) -> None:
        """Start the interactive chat session."""
        logger.info(f"Starting terminal chat session {self.session.session_id}")
        try:
            asyncio.run(self.run())
        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]👋 Goodbye![/yellow]")

    def _show_message(self, message: Message) -> None:
        self.console.print(render_message(message))

    def _show_help(self) -> None:
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /clear - Clear the conversation and start over
• /voice - Voice input (not available)
• /download - Download the chat (not available)
• /quit or /exit - Exit the chat

[bold]Tips:[/bold]
• Each message is sent on its own; earlier turns are not included
• Set GEMINI_API_KEY before starting, and GEMINI_MODEL to pick a model
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]❓ Help[/cyan]", border_style="cyan"))


def main() -> None:
    """Main entry point for the chat CLI."""
    setup_logging(LogConfig.from_env(default_level="WARNING", stream="stderr"))

    chat = ChatCLI()
    chat.start()


if __name__ == "__main__":
    main()
