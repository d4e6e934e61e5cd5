"""
Reconstruction of the reply hierarchy from a flat comment batch.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from ecp.models import CommentNode, CommentRecord, Forest


def _newest_first(nodes: list[CommentNode]) -> None:
    # list.sort is stable, so equal timestamps keep batch order
    nodes.sort(key=lambda n: n.created_at, reverse=True)


def build_forest(records: Iterable[CommentRecord]) -> Forest:
    """
    Group a flat batch of records into a forest by parent reference.

    Every record becomes exactly one node. A record whose parent is missing
    from the batch is a root. Roots and every children list are ordered
    newest first by numeric createdAt.
    """
    # 1. Index every node before linking: replies may precede their parent
    nodes: list[CommentNode] = [CommentNode(record) for record in records]
    by_id: dict[str, CommentNode] = {node.id: node for node in nodes}

    # 2. Link each node into exactly one slot
    roots: Forest = []
    for node in nodes:
        parent_id = node.record.parent_id
        parent = by_id.get(parent_id) if parent_id else None
        if parent is not None:
            parent.children.append(node)
        else:
            roots.append(node)

    # 3. Order
    _newest_first(roots)
    for node in nodes:
        if node.children:
            _newest_first(node.children)

    return roots


def iter_nodes(forest: Forest, depth: int = 0) -> Iterator[tuple[CommentNode, int]]:
    """Pre-order walk yielding (node, depth). Only follows child lists."""
    for node in forest:
        yield node, depth
        yield from iter_nodes(node.children, depth + 1)


def count_nodes(forest: Forest) -> int:
    return sum(1 for _ in iter_nodes(forest))
