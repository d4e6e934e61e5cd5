"""
Render/collapse controller: turns a forest plus per-node collapse flags into
a nested view model that the TUI, CLI and HTML export all draw from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ecp.constants import (
    ADDRESS_HEAD_CHARS,
    ADDRESS_MIN_ABBREVIATE,
    ADDRESS_TAIL_CHARS,
    ERROR_MESSAGE,
    EXPLORER_ADDRESS_URL,
    HIDE_REPLIES_LABEL,
    LOADING_MESSAGE,
    NO_COMMENTS_MESSAGE,
    NO_ROOTS_MESSAGE,
    SHOW_REPLIES_LABEL,
    UNKNOWN_DATE,
)
from ecp.logging_config import get_logger
from ecp.models import CommentNode, CommentRecord, Forest, is_digit_string, parse_timestamp
from ecp.tree import build_forest, count_nodes, iter_nodes

logger = get_logger(__name__)

RenderState = dict[str, bool]


def format_address(address: Optional[str]) -> str:
    if not address:
        return ""
    if len(address) < ADDRESS_MIN_ABBREVIATE:
        return address
    return f"{address[:ADDRESS_HEAD_CHARS]}...{address[-ADDRESS_TAIL_CHARS:]}"


def format_date(created_at: Optional[str]) -> str:
    """Milliseconds since the epoch as local date and time."""
    if not is_digit_string(created_at):
        return UNKNOWN_DATE
    try:
        dt = datetime.fromtimestamp(parse_timestamp(created_at) / 1000)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_DATE
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def explorer_url(address: Optional[str]) -> str:
    if not address:
        return ""
    return EXPLORER_ADDRESS_URL.format(address=address)


def toggle_label(expanded: bool, count: int) -> str:
    template = HIDE_REPLIES_LABEL if expanded else SHOW_REPLIES_LABEL
    return template.format(count=count)


class DisplayKind(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    NO_ROOTS = "no_roots"
    COMMENTS = "comments"


@dataclass
class CommentView:
    """One rendered comment. Content is plain text, never markup."""

    id: str
    depth: int
    author: str
    author_url: str
    app: str
    app_url: str
    date: str
    channel: str
    reply_to: str
    reply_to_url: str
    content: str
    child_count: int
    expanded: bool
    toggle_label: str
    children: list[CommentView] = field(default_factory=list)


@dataclass
class RootView:
    kind: DisplayKind
    message: str = ""
    comments: list[CommentView] = field(default_factory=list)


def render_comment(node: CommentNode, state: RenderState, depth: int = 0) -> CommentView:
    record = node.record
    expanded = state.get(node.id, True)
    return CommentView(
        id=node.id,
        depth=depth,
        author=format_address(record.author),
        author_url=explorer_url(record.author),
        app=format_address(record.app),
        app_url=explorer_url(record.app),
        date=format_date(record.created_at),
        channel=record.channel_id,
        reply_to=format_address(record.parent_id),
        reply_to_url=explorer_url(record.parent_id),
        content=record.content,
        child_count=node.child_count,
        expanded=expanded,
        toggle_label=toggle_label(expanded, node.child_count) if node.children else "",
        children=[render_comment(c, state, depth + 1) for c in node.children],
    )


def render_forest(forest: Forest, state: RenderState, record_count: int) -> RootView:
    if record_count == 0:
        return RootView(DisplayKind.EMPTY, NO_COMMENTS_MESSAGE)
    if not forest:
        # Every record resolved to a parent (only possible through a cycle)
        return RootView(DisplayKind.NO_ROOTS, NO_ROOTS_MESSAGE)
    return RootView(
        DisplayKind.COMMENTS,
        comments=[render_comment(node, state) for node in forest],
    )


class CommentController:
    """Owns the current forest and its collapse flags."""

    def __init__(self) -> None:
        self.forest: Forest = []
        self.record_count: int = 0
        self.state: RenderState = {}
        self._toggleable: set[str] = set()
        self.generation: int = 0
        self.view: RootView = RootView(DisplayKind.LOADING, LOADING_MESSAGE)

    def _discard(self) -> None:
        self.generation += 1
        self.forest = []
        self.record_count = 0
        self.state = {}
        self._toggleable = set()

    def show_loading(self, message: str = LOADING_MESSAGE) -> RootView:
        self.view = RootView(DisplayKind.LOADING, message)
        return self.view

    def show_error(self, error: Exception | str) -> RootView:
        self._discard()
        self.view = RootView(DisplayKind.ERROR, ERROR_MESSAGE.format(error=error))
        return self.view

    def load(self, records: list[CommentRecord]) -> RootView:
        """Replace everything with a freshly built forest, all expanded."""
        self._discard()
        self.forest = build_forest(records)
        self.record_count = len(records)
        self._toggleable = {n.id for n, _ in iter_nodes(self.forest) if n.children}
        logger.debug(
            "built forest",
            records=self.record_count,
            roots=len(self.forest),
            reachable=count_nodes(self.forest),
        )
        self.view = render_forest(self.forest, self.state, self.record_count)
        return self.view

    def render(self) -> RootView:
        """Re-render the current forest. An error stays an error until the next load."""
        if self.view.kind is not DisplayKind.ERROR:
            self.view = render_forest(self.forest, self.state, self.record_count)
        return self.view

    def can_toggle(self, comment_id: str) -> bool:
        return comment_id in self._toggleable

    def is_expanded(self, comment_id: str) -> bool:
        return self.state.get(comment_id, True)

    def toggle(self, comment_id: str) -> bool:
        """Flip one node's flag and return the new value."""
        if not self.can_toggle(comment_id):
            raise KeyError(comment_id)
        expanded = not self.is_expanded(comment_id)
        self.state[comment_id] = expanded
        return expanded

    def set_all(self, expanded: bool) -> None:
        for comment_id in self._toggleable:
            self.state[comment_id] = expanded
