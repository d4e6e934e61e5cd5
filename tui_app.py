import argparse
import asyncio
from typing import ClassVar, Optional

from rich.style import Style
from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Button, Footer, Header, LoadingIndicator, Static

from ecp.client import FetchError, fetch_comments
from ecp.config import get_api_url
from ecp.constants import TUI_INDENT_CELLS
from ecp.logging_config import configure_logging
from ecp.render import CommentController, CommentView, DisplayKind, RootView, toggle_label


def _link(text: str, url: str) -> Text:
    return Text(text, style=Style(link=url) if url else "")


def comment_header(view: CommentView) -> Text:
    header = Text.assemble(
        ("Author: ", "bold"),
        _link(view.author, view.author_url),
        "  ",
        ("App: ", "bold"),
        _link(view.app, view.app_url),
        f"  Date: {view.date}  Channel: {view.channel}",
    )
    if view.reply_to:
        header.append("  (reply to ")
        header.append_text(_link(view.reply_to, view.reply_to_url))
        header.append(")")
    return header


class CommentItem(Vertical):
    def __init__(self, comment: CommentView, controller: CommentController):
        super().__init__(classes="comment")
        self.comment = comment
        self.controller = controller
        self.generation = controller.generation
        self.toggle_button: Optional[Button] = None
        self.replies: Optional[Vertical] = None

    def compose(self) -> ComposeResult:
        yield Static(comment_header(self.comment), classes="comment-header")
        yield Static(Text(self.comment.content), classes="comment-content")
        if self.comment.child_count:
            self.toggle_button = Button(Text(self.comment.toggle_label), classes="toggle-replies")
            yield self.toggle_button
            self.replies = Vertical(classes="comment-children")
            self.replies.styles.margin = (0, 0, 0, TUI_INDENT_CELLS)
            self.replies.display = self.comment.expanded
            with self.replies:
                for child in self.comment.children:
                    yield CommentItem(child, self.controller)

    @property
    def expanded(self) -> bool:
        return self.controller.is_expanded(self.comment.id)

    def sync(self) -> None:
        """Reflect the controller's flag for this comment."""
        if self.toggle_button is None or self.replies is None:
            return
        self.toggle_button.label = Text(toggle_label(self.expanded, self.comment.child_count))
        self.replies.display = self.expanded

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button is not self.toggle_button:
            return
        event.stop()
        # Items left over from a superseded forest have nothing to toggle
        if self.generation != self.controller.generation:
            return
        if not self.controller.can_toggle(self.comment.id):
            return
        self.controller.toggle(self.comment.id)
        self.sync()


class CommentsTUI(App):
    CSS = """
    #loading { display: none; }
    App.loading #loading { display: block; }
    App.loading #comments { display: none; }

    #message { padding: 1; }
    #message.error { color: red; text-style: bold; }
    #message.empty, #message.no_roots { color: $text-muted; text-style: italic; }

    .comment { height: auto; border-left: solid gray; padding-left: 1; margin-bottom: 1; }
    .comment-header { color: #aaa; }
    .comment-content { margin: 0 0 1 0; }
    .comment-children { height: auto; }
    .toggle-replies { min-width: 0; height: 1; border: none; }
    """

    BINDINGS: ClassVar[list[Binding]] = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("c", "collapse_all", "Collapse all"),
        Binding("e", "expand_all", "Expand all"),
    ]

    def __init__(self, api_url: Optional[str] = None):
        super().__init__()
        self.api_url = api_url
        self.controller = CommentController()
        self._in_flight = 0
        self._mount_lock = asyncio.Lock()

    def compose(self) -> ComposeResult:
        yield Header()
        yield LoadingIndicator(id="loading")
        yield Static("", id="message")
        yield VerticalScroll(id="comments")
        yield Footer()

    async def on_mount(self): self.action_refresh()

    @work
    async def action_refresh(self):
        # Overlapping refreshes are not cancelled; the last to finish is shown
        self._in_flight += 1
        self.add_class("loading")
        self.show_view(self.controller.show_loading())
        try:
            records = await fetch_comments(self.api_url)
        except FetchError as e:
            view = self.controller.show_error(e)
        else:
            view = self.controller.load(records)
        finally:
            generation = self.controller.generation
            self._in_flight -= 1
            if not self._in_flight:
                self.remove_class("loading")
        await self.mount_view(view, generation)

    def show_view(self, view: RootView) -> None:
        message = self.query_one("#message", Static)
        message.set_classes(view.kind.value)
        message.update(Text(view.message))
        message.display = view.kind is not DisplayKind.COMMENTS

    async def mount_view(self, view: RootView, generation: int) -> None:
        """Swap in a finished view unless a newer load or error replaced it."""
        async with self._mount_lock:
            if generation != self.controller.generation:
                return
            self.show_view(view)
            container = self.query_one("#comments", VerticalScroll)
            await container.remove_children()
            if view.kind is DisplayKind.COMMENTS:
                await container.mount_all(
                    CommentItem(comment, self.controller) for comment in view.comments
                )

    def _set_all(self, expanded: bool) -> None:
        self.controller.set_all(expanded)
        for item in self.query(CommentItem):
            item.sync()

    def action_collapse_all(self):
        self._set_all(False)

    def action_expand_all(self):
        self._set_all(True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Browse ECP comments as a collapsible tree.")
    parser.add_argument("--api-url", default=None)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    configure_logging(args.log_level)
    CommentsTUI(args.api_url or get_api_url()).run()


if __name__ == "__main__":
    main()
