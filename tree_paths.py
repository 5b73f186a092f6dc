"""
Index paths into the document tree.

A path is the sequence of child indices leading from the root to a node; the
empty path is the root itself. Indices count every child, comments included,
so a path stays valid only until a sibling before it (or an ancestor) is
removed.
"""

from typing import Iterator, Sequence, Tuple

from errors import PathError
from models import XmlElementNode, XmlNode, NodePath


def resolve_path(root: XmlElementNode, path: Sequence[int]) -> XmlNode:
    """Return the node addressed by ``path``"""
    current: XmlNode = root
    for depth, index in enumerate(path):
        if current.is_comment:
            raise PathError("path exceeds tree depth", path[:depth + 1])
        if index < 0 or index >= len(current.children):
            raise PathError("index out of range", path[:depth + 1])
        current = current.children[index]
    return current


def resolve_element(root: XmlElementNode, path: Sequence[int]) -> XmlElementNode:
    """Like resolve_path, but the target must be an element"""
    node = resolve_path(root, path)
    if node.is_comment:
        raise PathError("path addresses a comment node", path)
    return node


def walk_tree(root: XmlElementNode) -> Iterator[Tuple[NodePath, XmlNode]]:
    """Yield (path, node) pairs depth-first, parents before children"""
    stack = [((), root)]
    while stack:
        path, node = stack.pop()
        yield path, node
        if node.is_comment:
            continue
        for index in range(len(node.children) - 1, -1, -1):
            stack.append((path + (index,), node.children[index]))


def parent_path(path: Sequence[int]) -> NodePath:
    if not path:
        raise PathError("the root has no parent", path)
    return tuple(path[:-1])


def format_path(path: Sequence[int]) -> str:
    """Render a path as '/0/2/1' ('/' for the root)"""
    return "/" + "/".join(str(index) for index in path)
