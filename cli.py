import argparse
import asyncio
from pathlib import Path

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from ecp.client import FetchError, fetch_comments
from ecp.config import get_api_url, save_config
from ecp.logging_config import configure_logging
from ecp.render import CommentController, CommentView, DisplayKind, RootView
from generate_html import generate_page_html

console = Console()


def comment_label(comment: CommentView) -> Text:
    label = Text.assemble(
        (comment.author or "unknown", "cyan"),
        " via ",
        (comment.app or "unknown", "magenta"),
        (f"  {comment.date}", "dim"),
        (f"  #{comment.channel}", "dim"),
    )
    if comment.reply_to:
        label.append(f"  (reply to {comment.reply_to})", style="dim italic")
    label.append("\n")
    # Plain Text: comment content is never parsed as markup
    label.append(comment.content)
    if comment.child_count:
        label.append(f"\n{comment.toggle_label}", style="yellow")
    return label


def add_comment(parent: Tree, comment: CommentView) -> None:
    branch = parent.add(comment_label(comment), expanded=comment.expanded)
    for child in comment.children:
        add_comment(branch, child)


def build_tree(view: RootView) -> Tree:
    tree = Tree(Text("ECP Comments", style="bold"), guide_style="dim")
    for comment in view.comments:
        add_comment(tree, comment)
    return tree


async def main(args) -> int:
    if args.api_url:
        save_config("api_url", args.api_url)
    api_url = args.api_url or get_api_url()

    controller = CommentController()
    with console.status(controller.show_loading().message):
        try:
            records = await fetch_comments(api_url)
        except FetchError as e:
            view = controller.show_error(e)
        else:
            controller.load(records)
            if args.collapsed:
                controller.set_all(False)
            view = controller.render()

    if args.html:
        Path(args.html).write_text(generate_page_html(view), encoding="utf-8")

    if view.kind is DisplayKind.ERROR:
        console.print(view.message, style="red", markup=False)
        return 1
    if view.kind is not DisplayKind.COMMENTS:
        console.print(view.message, style="yellow", markup=False)
        return 0

    console.print(build_tree(view))
    console.print(
        f"[dim]{controller.record_count} comments, {len(controller.forest)} threads.[/]"
    )
    return 0


def run() -> None:
    parser = argparse.ArgumentParser(description="Print ECP comments as a reply tree.")
    parser.add_argument("--api-url", default=None, help="GraphQL endpoint (saved for next time)")
    parser.add_argument("--collapsed", action="store_true", help="Hide all replies")
    parser.add_argument("--html", default=None, help="Also write a static HTML page here")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    configure_logging(args.log_level)
    raise SystemExit(asyncio.run(main(args)))


if __name__ == "__main__":
    run()
