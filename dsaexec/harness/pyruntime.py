"""Runtime support embedded verbatim into synthesized Python harnesses.

Every class and function here is copied into generated programs with
``inspect.getsource``, so this module must stay self-contained: only ``json``
and ``deque`` may be referenced, and nothing may depend on module state.
The same code is imported directly by the package and its tests.
"""

from __future__ import annotations

import json
from collections import deque


class ListNode:
    def __init__(self, val=0, next=None):
        self.val = val
        self.next = next


class TreeNode:
    def __init__(self, val=0, left=None, right=None):
        self.val = val
        self.left = left
        self.right = right


def create_linked_list(values, pos=-1):
    if not values:
        return None
    nodes = [ListNode(v) for v in values]
    for i in range(len(nodes) - 1):
        nodes[i].next = nodes[i + 1]
    if 0 <= pos < len(nodes):
        nodes[-1].next = nodes[pos]
    return nodes[0]


def linked_list_to_array(head):
    values = []
    visited = set()
    node = head
    while node is not None and id(node) not in visited:
        visited.add(id(node))
        values.append(node.val)
        node = node.next
    return values


def array_to_tree(values):
    if not values or values[0] is None:
        return None
    root = TreeNode(values[0])
    queue = deque([root])
    i = 1
    while queue and i < len(values):
        node = queue.popleft()
        if i < len(values) and values[i] is not None:
            node.left = TreeNode(values[i])
            queue.append(node.left)
        i += 1
        if i < len(values) and values[i] is not None:
            node.right = TreeNode(values[i])
            queue.append(node.right)
        i += 1
    return root


def tree_to_array(root):
    if root is None:
        return []
    values = []
    queue = deque([root])
    while queue:
        node = queue.popleft()
        if node is None:
            values.append(None)
            continue
        values.append(node.val)
        queue.append(node.left)
        queue.append(node.right)
    while values and values[-1] is None:
        values.pop()
    return values


def to_plain(value):
    if hasattr(value, "val") and hasattr(value, "left") and hasattr(value, "right"):
        return tree_to_array(value)
    if hasattr(value, "val") and hasattr(value, "next"):
        return linked_list_to_array(value)
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((to_plain(v) for v in value), key=repr)
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e15:
        return int(value)
    return value


def to_canonical(value):
    plain = to_plain(value)
    if isinstance(plain, str):
        return plain
    return json.dumps(plain, separators=(",", ":"), ensure_ascii=False)


def resolve_entry_point(name):
    func = globals().get(name)
    if callable(func) and not isinstance(func, type):
        return func
    solution_class = globals().get("Solution")
    if solution_class is not None:
        method = getattr(solution_class(), name, None)
        if method is not None:
            return method
    raise NameError(f"Function '{name}' not found")
