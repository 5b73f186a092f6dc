"""
Copy-on-write edits of the document tree.

Every function takes the current root and returns a new root. Only the nodes
on the way from the root to the edited node are rebuilt; all other subtrees
are shared with the input, which is never modified.
"""

from dataclasses import fields, replace
from typing import Callable, Dict, Mapping, Optional, Sequence

from errors import PathError
from models import XmlElementNode, XmlNode
from tree_paths import resolve_element, resolve_path
from xml_service import is_valid_xml_name


def _rebuild(node: XmlNode, path: Sequence[int], depth: int,
             edit: Callable[[XmlNode], XmlNode]) -> XmlNode:
    if depth == len(path):
        return edit(node)
    if node.is_comment:
        raise PathError("path exceeds tree depth", path[:depth + 1])
    index = path[depth]
    if index < 0 or index >= len(node.children):
        raise PathError("index out of range", path[:depth + 1])
    children = list(node.children)
    children[index] = _rebuild(children[index], path, depth + 1, edit)
    return replace(node, children=children)


def _edit_at(root: XmlElementNode, path: Sequence[int],
             edit: Callable[[XmlNode], XmlNode]) -> XmlElementNode:
    return _rebuild(root, tuple(path), 0, edit)


def update_element(root: XmlElementNode, path: Sequence[int], **changes) -> XmlElementNode:
    """Replace the node at ``path`` with a copy whose given fields are overwritten.

    ``changes`` holds field names of the addressed node type, e.g.
    ``attributes=...`` or ``text_content=...`` for elements and
    ``comment_text=...`` for comments.
    """
    def edit(node: XmlNode) -> XmlNode:
        allowed = {f.name for f in fields(node)}
        unknown = set(changes) - allowed
        if unknown:
            raise TypeError(f"{type(node).__name__} has no field(s): {', '.join(sorted(unknown))}")
        return replace(node, **changes)

    return _edit_at(root, path, edit)


def add_child_element(root: XmlElementNode, parent_path: Sequence[int], new_node: XmlNode) -> XmlElementNode:
    """Append ``new_node`` as the last child of the element at ``parent_path``"""
    def edit(node: XmlNode) -> XmlNode:
        if node.is_comment:
            raise PathError("cannot add children to a comment node", parent_path)
        return replace(node, children=node.children + (new_node,))

    return _edit_at(root, parent_path, edit)


def delete_element(root: XmlElementNode, path: Sequence[int]) -> XmlElementNode:
    """Remove the node at ``path``. Paths of its later siblings shift down by one."""
    if not path:
        raise PathError("the root element cannot be deleted", path)
    resolve_path(root, path)
    index = path[-1]

    def edit(parent: XmlNode) -> XmlNode:
        children = parent.children[:index] + parent.children[index + 1:]
        return replace(parent, children=children)

    return _edit_at(root, path[:-1], edit)


def set_attribute(root: XmlElementNode, path: Sequence[int], name: str, value: str) -> XmlElementNode:
    """Add the attribute, or overwrite its value if it exists"""
    element = resolve_element(root, path)
    attributes: Dict[str, str] = dict(element.attributes)
    attributes[name] = value
    return update_element(root, path, attributes=attributes)


def delete_attribute(root: XmlElementNode, path: Sequence[int], name: str) -> XmlElementNode:
    """Remove the attribute; removing an absent attribute changes nothing"""
    element = resolve_element(root, path)
    attributes = {key: value for key, value in element.attributes.items() if key != name}
    return update_element(root, path, attributes=attributes)


def set_text_content(root: XmlElementNode, path: Sequence[int], text: str) -> XmlElementNode:
    resolve_element(root, path)
    return update_element(root, path, text_content=text)


def create_element(tag_name: str, text_content: str = "",
                   attributes: Optional[Mapping[str, str]] = None) -> XmlElementNode:
    """Build a new element for add_child_element"""
    tag_name = (tag_name or "").strip()
    if not tag_name:
        raise ValueError("Element tag name must not be empty")
    if not is_valid_xml_name(tag_name):
        raise ValueError(f"Invalid element tag name: {tag_name!r}")
    for name in attributes or {}:
        if not is_valid_xml_name(name):
            raise ValueError(f"Invalid attribute name: {name!r}")
    return XmlElementNode(
        tag_name=tag_name,
        attributes=dict(attributes or {}),
        text_content=(text_content or "").strip(),
    )
