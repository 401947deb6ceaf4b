import pytest
from qatree.models.qa_tree import QaTree, QaTreeNode
from qatree.models.question import InputQuestion, SingleChoiceQuestion, Option

def test_empty_tree():
    tree = QaTree()
    assert tree.is_empty()
    assert len(tree) == 0
    assert list(tree.walk()) == []

def test_set_root_and_append():
    tree = QaTree()
    root = tree.set_root(InputQuestion(id="q1", question="Goal?"), node_id="root")
    child = tree.append("root", InputQuestion(id="q2", question="Audience?"), node_id="c1")
    assert tree.root is root
    assert root.children == [child]
    assert child.parent_id == "root"
    assert tree.get("c1") is child
    assert tree.parent_of("c1") is root
    assert tree.parent_of("root") is None
    assert len(tree) == 2
    assert "c1" in tree

def test_generated_node_ids_are_unique():
    tree = QaTree()
    root = tree.set_root(None)
    a = tree.append(root.id, None)
    b = tree.append(root.id, None)
    assert len({root.id, a.id, b.id}) == 3

def test_second_root_rejected():
    tree = QaTree()
    tree.set_root(None, node_id="r")
    with pytest.raises(ValueError, match="already has a root"):
        tree.set_root(None)

def test_duplicate_id_rejected():
    tree = QaTree()
    tree.set_root(None, node_id="r")
    tree.append("r", None, node_id="x")
    with pytest.raises(ValueError, match="Duplicate node id"):
        tree.append("r", None, node_id="x")
    with pytest.raises(ValueError, match="Duplicate node id"):
        tree.append("x", None, node_id="r")

def test_unknown_parent_rejected():
    tree = QaTree()
    with pytest.raises(ValueError, match="Parent node not found"):
        tree.append("missing", None)

def test_branch_lookup():
    tree = QaTree()
    question = SingleChoiceQuestion(id="q1", options=[Option(id="a", label="Red")])
    tree.set_root(question, node_id="r")
    child = tree.append("r", None, node_id="c", branch="a")
    assert tree.child_for_branch("r", "a") is child
    assert tree.child_for_branch("r", "b") is None
    with pytest.raises(ValueError, match="already taken"):
        tree.append("r", None, branch="a")

def test_walk_is_preorder_in_insertion_order():
    tree = QaTree()
    tree.set_root(None, node_id="r")
    tree.append("r", None, node_id="z", branch="2")
    tree.append("r", None, node_id="a", branch="1")
    tree.append("z", None, node_id="z1")
    order = [(node.id, parent_id) for node, parent_id in tree.walk()]
    assert order == [("r", None), ("z", "r"), ("z1", "z"), ("a", "r")]

def test_tree_from_nested_data_builds_index():
    tree = QaTree.model_validate({
        "root": {
            "id": "r",
            "question": {"id": "q1", "type": "input", "question": "Goal?"},
            "children": [{"id": "c1", "question": {"id": "q2", "type": "multi"}}],
        }
    })
    assert len(tree) == 2
    assert tree.parent_of("c1").id == "r"
    tree.append("c1", None, node_id="c2")
    assert tree.get("c2").parent_id == "c1"

def test_tree_from_nested_data_rejects_duplicate_ids():
    with pytest.raises(ValueError):
        QaTree(root=QaTreeNode(id="r", children=[QaTreeNode(id="r")]))

def test_snapshot_is_independent():
    tree = QaTree()
    tree.set_root(InputQuestion(id="q1"), node_id="r")
    copy = tree.snapshot()
    tree.append("r", None, node_id="c")
    tree.get("r").question.answer = "changed"
    assert len(copy) == 1
    assert copy.get("r").question.answer is None

def chain(depth):
    tree = QaTree()
    tree.set_root(InputQuestion(id="q0"), node_id="n0")
    for i in range(1, depth):
        tree.append(f"n{i - 1}", InputQuestion(id=f"q{i}"), node_id=f"n{i}")
    return tree

def test_snapshot_of_deep_chain():
    tree = chain(1500)
    copy = tree.snapshot()
    assert len(copy) == 1500
    assert copy.get("n1499").parent_id == "n1498"
    assert [n.id for n, _ in copy.walk()] == [n.id for n, _ in tree.walk()]

def test_snapshot_keeps_branches_and_order():
    tree = QaTree()
    tree.set_root(SingleChoiceQuestion(id="q1", options=[Option(id="a", label="Red")]), node_id="r")
    tree.append("r", None, node_id="z", branch="b")
    tree.append("r", None, node_id="a")
    tree.append("r", None, node_id="m", branch="a")
    copy = tree.snapshot()
    assert [c.id for c in copy.root.children] == ["z", "a", "m"]
    assert copy.root.branches == {"b": "z", "a": "m"}
    assert copy.child_for_branch("r", "a").id == "m"
    assert copy.get("r").question is not tree.get("r").question

def test_snapshot_of_empty_tree():
    assert QaTree().snapshot().is_empty()
