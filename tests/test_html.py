import pytest
from unittest.mock import AsyncMock, patch

import generate_html
from generate_html import generate_comment_html, generate_page_html
from ecp.client import QueryError
from ecp.render import CommentController, DisplayKind


@pytest.fixture
def controller(record):
    ctl = CommentController()
    ctl.load([
        record("p", "100", author="0xAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"),
        record("c", "200", parent_id="p", content="<img src=x onerror=alert(1)>"),
    ])
    return ctl


def test_content_is_escaped(controller):
    page = generate_page_html(controller.view)
    assert "<img src=x" not in page
    assert "&lt;img src=x onerror=alert(1)&gt;" in page


def test_address_links_and_abbreviation(controller):
    html = generate_comment_html(controller.view.comments[0])
    assert 'href="https://etherscan.io/address/0xAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"' in html
    assert ">0xAAAA...AAAA</a>" in html


def test_reply_annotation_and_indent(controller):
    child = controller.view.comments[0].children[0]
    html = generate_comment_html(child)
    assert "(reply to" in html
    assert 'style="margin-left: 10px"' in html


def test_details_follow_collapse_state(controller):
    assert "<details open>" in generate_page_html(controller.view)
    controller.toggle("p")
    page = generate_page_html(controller.render())
    assert "<details>" in page
    assert "[+] Show Replies (1)" in page


def test_empty_and_no_roots_messages(record):
    ctl = CommentController()
    page = generate_page_html(ctl.load([]))
    assert 'class="no-comments-message"' in page
    assert "No comments found." in page

    page = generate_page_html(ctl.load([record("a", "1", parent_id="a")]))
    assert "No root comments to display" in page


def test_error_message_escaped():
    ctl = CommentController()
    page = generate_page_html(ctl.show_error("<b>boom</b>"))
    assert 'class="error-message"' in page
    assert "&lt;b&gt;boom&lt;/b&gt;" in page


@pytest.mark.asyncio
async def test_export_html_writes_error_state(tmp_path):
    out = tmp_path / "comments.html"
    with patch("generate_html.fetch_comments", new_callable=AsyncMock, side_effect=QueryError(["nope"])):
        view = await generate_html.export_html(out, "https://indexer.test/")
    assert view.kind is DisplayKind.ERROR
    assert "GraphQL error: nope" in out.read_text()


@pytest.mark.asyncio
async def test_export_html_writes_tree(tmp_path, record):
    out = tmp_path / "comments.html"
    with patch("generate_html.fetch_comments", new_callable=AsyncMock, return_value=[record("x", "1")]):
        view = await generate_html.export_html(out)
    assert view.kind is DisplayKind.COMMENTS
    assert 'class="comment"' in out.read_text()
