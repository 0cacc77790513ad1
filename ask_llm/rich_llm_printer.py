"""
Rich printers for displaying Responses and streamed replies in a terminal.
"""
import json
from typing import Dict, Any, AsyncIterator, Optional

from rich.console import Console, Group
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from .response import Response


def _render(text: str, meta: Optional[Dict[str, Any]], code_theme: str, inline_code_theme: str, empty: str) -> Any:
    if not text.strip():
        return Text(empty, style="dim italic")

    markdown = Markdown(text, code_theme=code_theme, inline_code_theme=inline_code_theme)
    if not meta:
        return markdown

    metadata_display = Syntax(
        json.dumps(meta, indent=2, default=str),
        "json",
        theme="lightbulb",
        background_color="default",
    )
    return Group(markdown, Panel(metadata_display, title="[bold]Metadata[/bold]", border_style="dim"))


class RichStreamPrinter:
    """
    Live display of a streamed reply.

    Consumes the events produced by Client.astream() and redraws the panel on
    every 'token' event.

    Attributes:
        title: Title for the display panel
        show_metadata: Whether to show cost and model at the end
        code_theme: Theme for code blocks
        inline_code_theme: Theme for inline code
        refresh_rate: Refresh rate for Live display
        border_style: Border style while streaming
    """

    def __init__(
        self,
        title: str = "Streaming Response",
        show_metadata: bool = True,
        code_theme: str = "coffee",
        inline_code_theme: str = "monokai",
        refresh_rate: int = 30,
        border_style: str = "blue",
        console: Optional[Console] = None,
    ):
        self.title = title
        self.show_metadata = show_metadata
        self.code_theme = code_theme
        self.inline_code_theme = inline_code_theme
        self.refresh_rate = refresh_rate
        self.border_style = border_style
        self.console = console or Console()
        self._full_text = ""

    async def print_stream(self, event_stream: AsyncIterator[Dict[str, Any]]) -> Response:
        """
        Display streaming events as they arrive.

        Returns:
            Response: Built from the final 'done' event.
        """
        self._full_text = ""
        response = None
        with Live(Panel("", border_style=self.border_style), refresh_per_second=self.refresh_rate,
                  console=self.console) as live:
            async for event in event_stream:
                if event["type"] == "token":
                    self._full_text += event["text"]
                    live.update(self._panel(None, is_final=False))
                elif event["type"] == "done":
                    self._full_text = event["text"]
                    response = Response(event["text"], event["cost_cents"])
                    meta = {"cost_cents": event["cost_cents"], **event.get("meta", {})}
                    live.update(self._panel(meta if self.show_metadata else None, is_final=True))
        return response

    def _panel(self, meta: Optional[Dict[str, Any]], is_final: bool) -> Panel:
        title = "[bold]Final Response[/bold]" if is_final else f"[bold]{self.title}[/bold]"
        content = _render(self._full_text, meta, self.code_theme, self.inline_code_theme,
                          "(waiting for response...)")
        return Panel(content, title=title, border_style="green" if is_final else self.border_style,
                     padding=(1, 2))

    def get_full_text(self) -> str:
        """Get the full assembled text."""
        return self._full_text


class RichPrinter:
    """
    Display of a complete Response.

    Attributes:
        title: Title for the display panel
        show_metadata: Whether to show the cost
        code_theme: Theme for code blocks
        inline_code_theme: Theme for inline code
        border_style: Border style for the panel
    """

    def __init__(
        self,
        title: str = "Response",
        show_metadata: bool = True,
        code_theme: str = "coffee",
        inline_code_theme: str = "monokai",
        border_style: str = "green",
        console: Optional[Console] = None,
    ):
        self.title = title
        self.show_metadata = show_metadata
        self.code_theme = code_theme
        self.inline_code_theme = inline_code_theme
        self.border_style = border_style
        self.console = console or Console()

    def print_response(self, response: Response) -> Response:
        """
        Print a Response in a panel, returning it for chaining.
        """
        meta = {"cost_cents": response.cost_cents} if self.show_metadata else None
        content = _render(response.text, meta, self.code_theme, self.inline_code_theme, "(empty response)")
        self.console.print(
            Panel(content, title=f"[bold]{self.title}[/bold]", border_style=self.border_style, padding=(1, 2))
        )
        return response
