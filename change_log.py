"""
Change log of an open document.

The log describes the net difference between the live tree and the tree the
document was loaded with. Value edits of the same attribute of the same
element kind collapse into a single entry, and the entry disappears once the
value is back to what it was originally. Structural edits (adding or deleting
elements and attributes) are appended as they happen.
"""

from typing import List, Optional, Sequence

from errors import PathError
from models import ChangeEntry, ChangeKind, XmlElementNode
from tree_paths import resolve_path

UNSET = "(unset)"


def _original_element(original_root: XmlElementNode, path: Sequence[int],
                      tag_name: str) -> Optional[XmlElementNode]:
    """The element at ``path`` in the original tree, if it is the same kind of element"""
    try:
        node = resolve_path(original_root, path)
    except PathError:
        return None
    if node.is_comment or node.tag_name != tag_name:
        return None
    return node


def _display(value: Optional[str]) -> str:
    return UNSET if value is None else value


def _without_attribute_update(changes: Sequence[ChangeEntry], name: Optional[str],
                              tag_name: str) -> List[ChangeEntry]:
    return [
        entry for entry in changes
        if not (entry.kind is ChangeKind.UPDATE_ATTRIBUTE
                and entry.attribute_name == name
                and entry.tag_name == tag_name)
    ]


def record_attribute_update(changes: Sequence[ChangeEntry], original_root: XmlElementNode,
                            current_root: XmlElementNode, path: Sequence[int],
                            name: str, new_value: str) -> List[ChangeEntry]:
    """Return the log after the attribute ``name`` at ``path`` is set to ``new_value``.

    ``current_root`` is the tree before the edit is applied.
    """
    element = resolve_path(current_root, path)
    if element.is_comment:
        raise PathError("path addresses a comment node", path)
    tag_name = element.tag_name

    original = _original_element(original_root, path, tag_name)
    original_value = original.attributes.get(name) if original is not None else None

    result = _without_attribute_update(changes, name, tag_name)

    if new_value != original_value:
        result.append(ChangeEntry(
            kind=ChangeKind.UPDATE_ATTRIBUTE,
            tag_name=tag_name,
            attribute_name=name,
            description=f"Updated {name} in <{tag_name}> from {_display(original_value)} to {new_value}",
        ))
    return result


def record_text_update(changes: Sequence[ChangeEntry], original_root: XmlElementNode,
                       current_root: XmlElementNode, path: Sequence[int],
                       new_text: str) -> List[ChangeEntry]:
    """Same as record_attribute_update, for the text content of an element"""
    element = resolve_path(current_root, path)
    if element.is_comment:
        raise PathError("path addresses a comment node", path)
    tag_name = element.tag_name

    original = _original_element(original_root, path, tag_name)
    original_text = original.text_content if original is not None else ""

    result = [
        entry for entry in changes
        if not (entry.kind is ChangeKind.UPDATE_TEXT and entry.tag_name == tag_name)
    ]

    if new_text != original_text:
        result.append(ChangeEntry(
            kind=ChangeKind.UPDATE_TEXT,
            tag_name=tag_name,
            description=f"Updated text of <{tag_name}> from {original_text or UNSET} to {new_text or UNSET}",
        ))
    return result


def record_structural_change(changes: Sequence[ChangeEntry], kind: ChangeKind, tag_name: str,
                             attribute_name: Optional[str] = None,
                             value: Optional[str] = None) -> List[ChangeEntry]:
    """Append an entry for an added or deleted element, attribute or comment.

    Deleting an attribute also drops the pending value update of that
    attribute, since the value it describes no longer exists. For a deleted
    comment ``tag_name`` is the parent element and ``value`` the comment text.
    """
    result = list(changes)
    if kind is ChangeKind.ADD_ATTRIBUTE:
        description = f'Added attribute {attribute_name}="{value or ""}" to <{tag_name}>'
    elif kind is ChangeKind.DELETE_ATTRIBUTE:
        description = f"Deleted attribute {attribute_name} from <{tag_name}>"
        result = _without_attribute_update(result, attribute_name, tag_name)
    elif kind is ChangeKind.ADD_ELEMENT:
        description = f"Added element <{tag_name}>"
    elif kind is ChangeKind.DELETE_ELEMENT:
        description = f"Deleted element <{tag_name}>"
    elif kind is ChangeKind.DELETE_COMMENT:
        description = f"Deleted comment <!--{value or ''}--> from <{tag_name}>"
    else:
        raise ValueError(f"{kind} is not a structural change")

    return result + [ChangeEntry(
        kind=kind,
        tag_name=tag_name,
        attribute_name=attribute_name,
        description=description,
    )]
