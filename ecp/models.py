"""Typed data models for ECP comments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TypedDict


class CommentRecordDict(TypedDict, total=False):
    """Comment payload as returned by the indexer (camelCase keys)."""

    id: str
    app: str
    author: str
    channelId: str
    commentType: str
    content: str
    createdAt: str
    parentId: Optional[str]


def _str(value: object) -> str:
    return "" if value is None else str(value)


def is_digit_string(value: Optional[str]) -> bool:
    """ASCII digits only. Rejects signs, underscores and non-ASCII numerals."""
    if not value:
        return False
    value = str(value).strip()
    return value.isascii() and value.isdigit()


def parse_timestamp(value: Optional[str]) -> int:
    """Parse a digit-string timestamp; missing or malformed values sort as 0."""
    if not is_digit_string(value):
        return 0
    try:
        return int(str(value).strip())
    except ValueError:
        # Past the interpreter's int string-length limit
        return 0


@dataclass(frozen=True)
class CommentRecord:
    """A single comment exactly as received, before tree reconstruction."""

    id: str
    parent_id: Optional[str]
    author: str
    app: str
    channel_id: str
    comment_type: str
    content: str
    created_at: str

    @classmethod
    def from_dict(cls, d: CommentRecordDict) -> CommentRecord:
        """Create a record from an indexer item."""
        return cls(
            id=_str(d.get("id")),
            parent_id=_str(d.get("parentId")) or None,
            author=_str(d.get("author")),
            app=_str(d.get("app")),
            channel_id=_str(d.get("channelId")),
            comment_type=_str(d.get("commentType")),
            content=_str(d.get("content")),
            created_at=_str(d.get("createdAt")),
        )

    def to_dict(self) -> CommentRecordDict:
        return {
            "id": self.id,
            "app": self.app,
            "author": self.author,
            "channelId": self.channel_id,
            "commentType": self.comment_type,
            "content": self.content,
            "createdAt": self.created_at,
            "parentId": self.parent_id,
        }

    @property
    def timestamp(self) -> int:
        return parse_timestamp(self.created_at)


@dataclass
class CommentNode:
    """A record plus the replies linked to it in the current batch."""

    record: CommentRecord
    children: list[CommentNode] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def created_at(self) -> int:
        return self.record.timestamp

    @property
    def child_count(self) -> int:
        return len(self.children)


Forest = list[CommentNode]
