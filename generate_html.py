from __future__ import annotations
import argparse
import asyncio
import html
from pathlib import Path
from typing import Optional

from rich.console import Console

from ecp.client import FetchError, fetch_comments
from ecp.config import get_api_url
from ecp.constants import HTML_INDENT_PX
from ecp.logging_config import configure_logging
from ecp.render import CommentController, CommentView, DisplayKind, RootView

console: Console = Console()

DEFAULT_OUTPUT_PATH = Path("comments.html")

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>ECP Comments</title>
<style>
body {{ font-family: sans-serif; max-width: 900px; margin: 2em auto; color: #222; }}
.comment {{ border-left: 2px solid #ddd; padding: 0.5em 0 0.5em 0.75em; margin-top: 0.5em; }}
.comment-header {{ font-size: 0.85em; color: #666; display: flex; flex-wrap: wrap; gap: 1em; }}
.comment-content {{ white-space: pre-wrap; margin: 0.4em 0; }}
.toggle-replies {{ cursor: pointer; color: #06c; font-size: 0.85em; }}
.loading-message, .no-comments-message {{ color: #888; font-style: italic; }}
.error-message {{ color: #c00; font-weight: bold; }}
</style>
</head>
<body>
<h1>ECP Comments</h1>
<div id="comments-container">
{body}
</div>
</body>
</html>
"""

MESSAGE_CLASSES = {
    DisplayKind.LOADING: "loading-message",
    DisplayKind.ERROR: "error-message",
    DisplayKind.EMPTY: "no-comments-message",
    DisplayKind.NO_ROOTS: "no-comments-message",
}


def _address_link(label: str, url: str) -> str:
    if not url:
        return html.escape(label)
    return (
        f'<a href="{html.escape(url, quote=True)}" target="_blank" rel="noopener">'
        f"{html.escape(label)}</a>"
    )


def generate_comment_html(comment: CommentView) -> str:
    """Render one comment and its replies. Every field is escaped."""
    parts = [
        f'<span class="author"><strong>Author:</strong> {_address_link(comment.author, comment.author_url)}</span>',
        f'<span class="app"><strong>App:</strong> {_address_link(comment.app, comment.app_url)}</span>',
        f'<span class="date">Date: {html.escape(comment.date)}</span>',
        f'<span class="channel">Channel: {html.escape(comment.channel)}</span>',
    ]
    if comment.reply_to:
        parts.append(
            f'<span class="parent-info">(reply to {_address_link(comment.reply_to, comment.reply_to_url)})</span>'
        )

    out = [
        f'<div class="comment" style="margin-left: {comment.depth * HTML_INDENT_PX}px">',
        f'<div class="comment-header">{"".join(parts)}</div>',
        f'<p class="comment-content">{html.escape(comment.content)}</p>',
    ]
    if comment.children:
        open_attr = " open" if comment.expanded else ""
        out.append(f"<details{open_attr}>")
        out.append(f'<summary class="toggle-replies">{html.escape(comment.toggle_label)}</summary>')
        out.append('<div class="comment-children">')
        out.extend(generate_comment_html(c) for c in comment.children)
        out.append("</div>")
        out.append("</details>")
    out.append("</div>")
    return "\n".join(out)


def generate_page_html(view: RootView) -> str:
    if view.kind is DisplayKind.COMMENTS:
        body = "\n".join(generate_comment_html(c) for c in view.comments)
    else:
        body = f'<p class="{MESSAGE_CLASSES[view.kind]}">{html.escape(view.message)}</p>'
    return PAGE_TEMPLATE.format(body=body)


async def export_html(output: Path, api_url: Optional[str] = None) -> RootView:
    """Fetch once and write the page. Fetch failures are written as the error state."""
    controller = CommentController()
    try:
        records = await fetch_comments(api_url)
    except FetchError as e:
        view = controller.show_error(e)
    else:
        view = controller.load(records)
    output.write_text(generate_page_html(view), encoding="utf-8")
    return view


async def main() -> None:
    parser = argparse.ArgumentParser(description="Export ECP comments as a static HTML page.")
    parser.add_argument("--output", "-o", type=Path, default=DEFAULT_OUTPUT_PATH)
    parser.add_argument("--api-url", default=None)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    configure_logging(args.log_level)
    view = await export_html(args.output, args.api_url or get_api_url())
    if view.kind is DisplayKind.ERROR:
        console.print(view.message, style="red", markup=False)
        raise SystemExit(1)
    console.print(f"Wrote {args.output}", style="green", markup=False)


if __name__ == "__main__":
    asyncio.run(main())
