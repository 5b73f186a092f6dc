"""
Data models for the attribute XML editor
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Dict, Optional, Any, Mapping, Tuple, Union
import os
import uuid


@dataclass(frozen=True)
class XmlCommentNode:
    """A comment child of an element"""
    comment_text: str = ""

    @property
    def is_comment(self) -> bool:
        return True


@dataclass(frozen=True)
class XmlElementNode:
    """An element of the document tree.

    Nodes are immutable: ``attributes`` is exposed as a read-only mapping and
    ``children`` / ``root_comments`` as tuples, so a tree can be shared between
    the live document and its original snapshot. Use the functions in
    ``tree_mutations`` to derive modified trees.
    """
    tag_name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: Tuple['XmlNode', ...] = ()
    text_content: str = ""
    root_comments: Tuple[str, ...] = ()

    def __post_init__(self):
        """Freeze container fields"""
        object.__setattr__(self, 'attributes', MappingProxyType(dict(self.attributes)))
        object.__setattr__(self, 'children', tuple(self.children))
        object.__setattr__(self, 'root_comments', tuple(self.root_comments))
        if self.text_content is None:
            object.__setattr__(self, 'text_content', "")

    def __hash__(self):
        return hash((self.tag_name, tuple(self.attributes.items()), self.children,
                     self.text_content, self.root_comments))

    @property
    def is_comment(self) -> bool:
        return False

    @property
    def element_children(self) -> List['XmlElementNode']:
        """Children that are elements, skipping comments"""
        return [child for child in self.children if not child.is_comment]

    def get_display_name(self) -> str:
        """Tag name followed by its attributes, for tree labels"""
        attrs = " ".join(f'{key}="{value}"' for key, value in self.attributes.items())
        if attrs:
            return f"{self.tag_name} [{attrs}]"
        return self.tag_name


XmlNode = Union[XmlElementNode, XmlCommentNode]
NodePath = Tuple[int, ...]


class ChangeKind(Enum):
    """Kinds of entries in a document's change log"""
    UPDATE_ATTRIBUTE = "update_attribute"
    ADD_ATTRIBUTE = "add_attribute"
    DELETE_ATTRIBUTE = "delete_attribute"
    ADD_ELEMENT = "add_element"
    DELETE_ELEMENT = "delete_element"
    UPDATE_TEXT = "update_text"
    DELETE_COMMENT = "delete_comment"


@dataclass(frozen=True)
class ChangeEntry:
    """One line of the change log"""
    kind: ChangeKind
    tag_name: str
    description: str
    attribute_name: Optional[str] = None

    def __str__(self):
        return self.description


@dataclass
class XmlFileRecord:
    """An open document: its current tree, the tree it was loaded with, and the
    net changes between the two"""
    name: str
    data: XmlElementNode
    original_data: Optional[XmlElementNode] = None
    changes: List[ChangeEntry] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    file_path: str = ""
    encoding: str = "utf-8"

    def __post_init__(self):
        """Post-initialization processing"""
        if self.original_data is None:
            # Trees are immutable, so the loaded tree is its own snapshot
            self.original_data = self.data
        if not self.name and self.file_path:
            self.name = os.path.basename(self.file_path)

    @property
    def is_modified(self) -> bool:
        return bool(self.changes)

    def change_descriptions(self) -> List[str]:
        """Get the change log as display strings"""
        return [entry.description for entry in self.changes]

    def get_display_name(self) -> str:
        """Get display name for UI"""
        if self.is_modified:
            return f"{self.name} *"
        return self.name

    @classmethod
    def read_file(cls, file_path: str) -> Tuple[str, str]:
        """Read a document from disk, returning its text and the encoding used"""
        encoding = cls._detect_encoding(file_path)
        with open(file_path, 'r', encoding=encoding) as file:
            return file.read(), encoding

    @staticmethod
    def _detect_encoding(file_path: str) -> str:
        """Detect file encoding"""
        encodings = ['utf-8', 'utf-8-sig', 'latin-1', 'cp1252']

        for encoding in encodings:
            try:
                with open(file_path, 'r', encoding=encoding) as file:
                    file.read()
                return encoding
            except UnicodeDecodeError:
                continue

        return 'utf-8'


@dataclass(frozen=True)
class ValidationRule:
    """Regex constraint of a parameter"""
    pattern: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class ParameterDescription:
    """Help text and validation constraints for one attribute name"""
    title: Optional[str] = None
    description: Optional[str] = None
    example: Optional[str] = None
    type: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    options: Tuple[str, ...] = ()
    validation: Optional[ValidationRule] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParameterDescription':
        """Build from the JSON form (camelCase keys)"""
        validation = None
        raw_validation = data.get("validation")
        if isinstance(raw_validation, dict):
            validation = ValidationRule(
                pattern=_optional_str(raw_validation.get("pattern")),
                message=_optional_str(raw_validation.get("message")),
            )

        options = data.get("options") or ()
        if isinstance(options, str):
            options = (options,)

        return cls(
            title=_optional_str(data.get("title")),
            description=_optional_str(data.get("description")),
            example=_optional_str(data.get("example")),
            type=_optional_str(data.get("type")),
            min_length=_optional_int(data.get("minLength")),
            max_length=_optional_int(data.get("maxLength")),
            min=_optional_float(data.get("min")),
            max=_optional_float(data.get("max")),
            options=tuple(str(option) for option in options),
            validation=validation,
        )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class AttributeValidationResult:
    """Outcome of checking one attribute value"""
    is_valid: bool
    error: Optional[str] = None

    def __bool__(self):
        return self.is_valid


@dataclass(frozen=True)
class ConstraintHints:
    """Input hints derived from a parameter description"""
    placeholder: Optional[str] = None
    hint: Optional[str] = None
    pattern: Optional[str] = None


@dataclass
class XmlStatistics:
    """XML document statistics"""
    element_count: int
    attribute_count: int
    text_node_count: int
    comment_count: int
    total_size: int  # in bytes

    def get_size_string(self) -> str:
        """Get human-readable size string"""
        if self.total_size < 1024:
            return f"{self.total_size} bytes"
        elif self.total_size < 1024 * 1024:
            return f"{self.total_size / 1024:.1f} KB"
        else:
            return f"{self.total_size / (1024 * 1024):.1f} MB"

    def __str__(self):
        return (
            f"Elements: {self.element_count}\n"
            f"Attributes: {self.attribute_count}\n"
            f"Text nodes: {self.text_node_count}\n"
            f"Comments: {self.comment_count}\n"
            f"Total size: {self.get_size_string()}"
        )


@dataclass
class EditorSettings:
    """Editor settings"""
    description_sources: List[str] = field(default_factory=list)
    recent_files: List[str] = field(default_factory=list)
    max_recent_files: int = 10
    default_export_name: str = "modified_file.xml"

    def add_recent_file(self, file_path: str):
        """Add file to recent files list"""
        if file_path in self.recent_files:
            self.recent_files.remove(file_path)

        self.recent_files.insert(0, file_path)

        if len(self.recent_files) > self.max_recent_files:
            self.recent_files = self.recent_files[:self.max_recent_files]

    def remove_recent_file(self, file_path: str):
        """Remove file from recent files list"""
        if file_path in self.recent_files:
            self.recent_files.remove(file_path)
