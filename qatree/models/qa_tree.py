import uuid
from typing import Dict, Iterator, List, Optional, Tuple
from pydantic import BaseModel, PrivateAttr
from qatree.models.question import Question

class QaTreeNode(BaseModel):
    id: str
    question: Optional[Question] = None
    parent_id: Optional[str] = None
    # Ordered, serialization follows this list
    children: List["QaTreeNode"] = []
    # branch key (e.g. selected option id) -> child node id
    branches: Dict[str, str] = {}

class QaTree(BaseModel):
    """
    Append-only question tree.

    Nodes are reachable by id through an index kept next to the root, so
    parent lookups never walk the tree. The append API refuses duplicate ids,
    unknown parents and a second root, which keeps the structure acyclic.
    """
    root: Optional[QaTreeNode] = None

    _index: Dict[str, QaTreeNode] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._index = {}
        if self.root is not None:
            self._reindex(self.root)

    def _reindex(self, node: QaTreeNode):
        stack = [node]
        while stack:
            current = stack.pop()
            if current.id in self._index:
                raise ValueError(f"Duplicate node id: {current.id}")
            self._index[current.id] = current
            for child in current.children:
                if child.parent_id != current.id:
                    child.parent_id = current.id
                stack.append(child)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, node_id) -> bool:
        return node_id in self._index

    def is_empty(self) -> bool:
        return self.root is None

    def get(self, node_id: str) -> Optional[QaTreeNode]:
        return self._index.get(node_id)

    def parent_of(self, node_id: str) -> Optional[QaTreeNode]:
        node = self._index.get(node_id)
        if node is None or node.parent_id is None:
            return None
        return self._index.get(node.parent_id)

    def set_root(self, question: Optional[Question], node_id: Optional[str] = None) -> QaTreeNode:
        if self.root is not None:
            raise ValueError("Tree already has a root")
        node = QaTreeNode(id=node_id or str(uuid.uuid4()), question=question)
        self.root = node
        self._index[node.id] = node
        return node

    def append(self, parent_id: str, question: Optional[Question], node_id: Optional[str] = None,
               branch: Optional[str] = None) -> QaTreeNode:
        parent = self._index.get(parent_id)
        if parent is None:
            raise ValueError(f"Parent node not found: {parent_id}")
        node_id = node_id or str(uuid.uuid4())
        if node_id in self._index:
            raise ValueError(f"Duplicate node id: {node_id}")
        if branch is not None and branch in parent.branches:
            raise ValueError(f"Branch '{branch}' already taken under node {parent_id}")

        node = QaTreeNode(id=node_id, question=question, parent_id=parent_id)
        parent.children.append(node)
        if branch is not None:
            parent.branches[branch] = node_id
        self._index[node_id] = node
        return node

    def child_for_branch(self, node_id: str, branch: str) -> Optional[QaTreeNode]:
        node = self._index.get(node_id)
        if node is None:
            return None
        return self._index.get(node.branches.get(branch))

    def snapshot(self) -> "QaTree":
        """Deep copy with a freshly built index. Rebuilt by walking, so depth is not bounded by recursion."""
        copy = QaTree()
        for node, parent_id in self.walk():
            question = node.question.model_copy(deep=True) if node.question is not None else None
            if parent_id is None:
                copy.set_root(question, node_id=node.id)
                continue
            parent = self._index[parent_id]
            branch = next((key for key, child_id in parent.branches.items() if child_id == node.id), None)
            copy.append(parent_id, question, node_id=node.id, branch=branch)
        return copy

    def walk(self) -> Iterator[Tuple[QaTreeNode, Optional[str]]]:
        """Pre-order walk yielding (node, parent_id), children in insertion order."""
        if self.root is None:
            return
        stack = [(self.root, None)]
        while stack:
            node, parent_id = stack.pop()
            yield node, parent_id
            for child in reversed(node.children):
                stack.append((child, node.id))

QaTreeNode.model_rebuild()
