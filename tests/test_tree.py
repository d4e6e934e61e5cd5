from ecp.models import CommentRecord
from ecp.tree import build_forest, count_nodes, iter_nodes


def ids(nodes):
    return [n.id for n in nodes]


def test_example_batch(record):
    forest = build_forest([
        record(1, "100"),
        record(2, "200", parent_id=1),
        record(3, "300"),
    ])
    assert ids(forest) == ["3", "1"]
    assert ids(forest[1].children) == ["2"]
    assert forest[0].children == []


def test_empty_batch():
    assert build_forest([]) == []


def test_child_before_parent(record):
    forest = build_forest([
        record("reply", "20", parent_id="root"),
        record("root", "10"),
    ])
    assert ids(forest) == ["root"]
    assert ids(forest[0].children) == ["reply"]


def test_orphan_becomes_root(record):
    forest = build_forest([
        record("a", "10"),
        record("b", "20", parent_id="not-in-batch"),
    ])
    assert ids(forest) == ["b", "a"]


def test_empty_parent_id_is_root():
    rec = CommentRecord.from_dict({"id": "x", "parentId": "", "createdAt": "5"})
    forest = build_forest([rec])
    assert ids(forest) == ["x"]


def test_numeric_not_lexicographic_order(record):
    # "9" > "10" as strings, but 10 is newer
    forest = build_forest([record("old", "9"), record("new", "10")])
    assert ids(forest) == ["new", "old"]


def test_children_sorted_independently(record):
    forest = build_forest([
        record("p", "1"),
        record("c1", "100", parent_id="p"),
        record("c2", "300", parent_id="p"),
        record("c3", "200", parent_id="p"),
        record("g1", "5", parent_id="c1"),
        record("g2", "7", parent_id="c1"),
    ])
    assert ids(forest[0].children) == ["c2", "c3", "c1"]
    c1 = forest[0].children[2]
    assert ids(c1.children) == ["g2", "g1"]


def test_ties_keep_batch_order(record):
    forest = build_forest([
        record("first", "50"),
        record("second", "50"),
        record("third", "50"),
    ])
    assert ids(forest) == ["first", "second", "third"]


def test_malformed_timestamp_sorts_as_zero(record):
    forest = build_forest([
        record("bad", "not-a-number"),
        record("missing", ""),
        record("good", "1"),
    ])
    assert ids(forest) == ["good", "bad", "missing"]


def test_two_node_cycle_has_no_roots(record):
    records = [record("a", "1", parent_id="b"), record("b", "2", parent_id="a")]
    forest = build_forest(records)
    assert forest == []
    assert count_nodes(forest) == 0


def test_self_reference_is_not_a_root(record):
    forest = build_forest([record("loop", "1", parent_id="loop"), record("ok", "2")])
    assert ids(forest) == ["ok"]


def test_cycle_does_not_swallow_unrelated_threads(record):
    forest = build_forest([
        record("a", "1", parent_id="b"),
        record("b", "2", parent_id="a"),
        record("root", "3"),
        record("reply", "4", parent_id="root"),
    ])
    assert ids(forest) == ["root"]
    assert count_nodes(forest) == 2


def test_iter_nodes_depths(record):
    forest = build_forest([
        record("r", "1"),
        record("c", "2", parent_id="r"),
        record("g", "3", parent_id="c"),
    ])
    assert [(n.id, d) for n, d in iter_nodes(forest)] == [("r", 0), ("c", 1), ("g", 2)]


def test_records_are_not_mutated(record):
    records = [record("r", "1"), record("c", "2", parent_id="r")]
    before = [r.to_dict() for r in records]
    build_forest(records)
    assert [r.to_dict() for r in records] == before


def test_rebuild_is_fresh(record):
    records = [record("r", "1"), record("c", "2", parent_id="r")]
    first = build_forest(records)
    second = build_forest(records)
    assert first[0] is not second[0]
    assert ids(second[0].children) == ["c"]
