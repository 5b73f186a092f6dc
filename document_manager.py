"""
Document manager - the open documents and the edits applied to them
"""

import os
from typing import Dict, List, Mapping, Optional, Sequence

from attribute_validation import describe_constraints, validate_attribute_value
from change_log import record_attribute_update, record_structural_change, record_text_update
from errors import PathError, ValidationError
from models import (
    AttributeValidationResult,
    ChangeKind,
    ConstraintHints,
    EditorSettings,
    NodePath,
    ParameterDescription,
    XmlElementNode,
    XmlFileRecord,
    XmlStatistics,
)
from parameter_descriptions import DescriptionsLoadResult, load_parameter_descriptions
from tree_mutations import (
    add_child_element,
    create_element,
    delete_attribute,
    delete_element,
    set_attribute,
    set_text_content,
)
from tree_paths import resolve_element, resolve_path
from xml_service import XmlService, is_valid_xml_name


class XmlDocumentManager:
    """Open documents and their edit operations.

    Attribute values are validated before they are applied; every applied
    edit updates the document's change log.
    """

    def __init__(self, descriptions: Optional[Mapping[str, ParameterDescription]] = None,
                 xml_service: Optional[XmlService] = None):
        self.xml_service = xml_service or XmlService()
        self.descriptions: Dict[str, ParameterDescription] = dict(descriptions or {})
        self.descriptions_status: Optional[DescriptionsLoadResult] = None
        self._documents: Dict[str, XmlFileRecord] = {}

    # Documents

    @property
    def documents(self) -> List[XmlFileRecord]:
        return list(self._documents.values())

    def open_document(self, name: str, xml_content: str) -> XmlFileRecord:
        """Parse ``xml_content`` and register it as a new document"""
        root = self.xml_service.parse_xml(xml_content)
        record = XmlFileRecord(name=name, data=root)
        self._documents[record.id] = record
        return record

    def open_file(self, file_path: str) -> XmlFileRecord:
        content, encoding = XmlFileRecord.read_file(file_path)
        root = self.xml_service.parse_xml(content)
        record = XmlFileRecord(
            name=os.path.basename(file_path),
            data=root,
            file_path=file_path,
            encoding=encoding,
        )
        self._documents[record.id] = record
        return record

    def get_document(self, file_id: str) -> XmlFileRecord:
        try:
            return self._documents[file_id]
        except KeyError:
            raise KeyError(f"No open document with id {file_id!r}") from None

    def close_document(self, file_id: str) -> XmlFileRecord:
        record = self.get_document(file_id)
        del self._documents[file_id]
        return record

    # Descriptions

    def set_descriptions(self, descriptions: Mapping[str, ParameterDescription]):
        self.descriptions = dict(descriptions)

    def load_descriptions(self, sources: Sequence[str] = (), include_default: bool = True) -> DescriptionsLoadResult:
        result = load_parameter_descriptions(sources, include_default=include_default)
        self.descriptions = dict(result.descriptions)
        self.descriptions_status = result
        return result

    def load_settings_descriptions(self, editor_settings: EditorSettings) -> DescriptionsLoadResult:
        """Load descriptions from the sources saved in the editor settings"""
        return self.load_descriptions(editor_settings.description_sources)

    def validate_attribute(self, name: str, value: str) -> AttributeValidationResult:
        return validate_attribute_value(name, value, self.descriptions)

    def describe_attribute(self, name: str) -> ConstraintHints:
        return describe_constraints(name, self.descriptions)

    def get_description(self, name: str) -> Optional[ParameterDescription]:
        return self.descriptions.get(name)

    # Edits

    def set_attribute(self, file_id: str, path: Sequence[int], name: str, value: str) -> XmlFileRecord:
        """Add or update an attribute.

        Raises:
            ValidationError: the value is rejected; the document is unchanged
            PathError: ``path`` does not address an element
        """
        name = name.strip()
        if not name:
            raise ValidationError("Attribute name must not be empty", name, value)
        if not is_valid_xml_name(name):
            raise ValidationError(f"Invalid attribute name: {name!r}", name, value)

        record = self.get_document(file_id)
        element = resolve_element(record.data, path)

        result = self.validate_attribute(name, value)
        if not result.is_valid:
            raise ValidationError(result.error or "Validation failed", name, value)

        current_value = element.attributes.get(name)
        if current_value == value:
            return record

        if current_value is None:
            changes = record_structural_change(
                record.changes, ChangeKind.ADD_ATTRIBUTE, element.tag_name, name, value)
        else:
            changes = record_attribute_update(
                record.changes, record.original_data, record.data, path, name, value)

        record.data = set_attribute(record.data, path, name, value)
        record.changes = changes
        return record

    def delete_attribute(self, file_id: str, path: Sequence[int], name: str) -> XmlFileRecord:
        """Delete an attribute; deleting an attribute that is not there does nothing"""
        record = self.get_document(file_id)
        element = resolve_element(record.data, path)
        if name not in element.attributes:
            return record

        record.data = delete_attribute(record.data, path, name)
        record.changes = record_structural_change(
            record.changes, ChangeKind.DELETE_ATTRIBUTE, element.tag_name, name)
        return record

    def add_element(self, file_id: str, parent_path: Sequence[int], tag_name: str,
                    text_content: str = "") -> NodePath:
        """Append a new element under ``parent_path`` and return its path"""
        record = self.get_document(file_id)
        parent = resolve_element(record.data, parent_path)
        new_node = create_element(tag_name, text_content)

        record.data = add_child_element(record.data, parent_path, new_node)
        record.changes = record_structural_change(
            record.changes, ChangeKind.ADD_ELEMENT, new_node.tag_name)
        return tuple(parent_path) + (len(parent.children),)

    def delete_element(self, file_id: str, path: Sequence[int]) -> XmlFileRecord:
        record = self.get_document(file_id)
        if not path:
            raise PathError("the root element cannot be deleted", path)
        node = resolve_path(record.data, path)

        if node.is_comment:
            parent = resolve_element(record.data, path[:-1])
            changes = record_structural_change(
                record.changes, ChangeKind.DELETE_COMMENT, parent.tag_name, value=node.comment_text)
        else:
            changes = record_structural_change(
                record.changes, ChangeKind.DELETE_ELEMENT, node.tag_name)
        record.data = delete_element(record.data, path)
        record.changes = changes
        return record

    def set_text_content(self, file_id: str, path: Sequence[int], text: str) -> XmlFileRecord:
        record = self.get_document(file_id)
        element = resolve_element(record.data, path)
        text = text.strip()
        if element.text_content == text:
            return record

        record.changes = record_text_update(
            record.changes, record.original_data, record.data, path, text)
        record.data = set_text_content(record.data, path, text)
        return record

    # Export and queries

    def export_document(self, file_id: str) -> str:
        return self.xml_service.serialize_xml(self.get_document(file_id).data)

    def export_to_file(self, file_id: str, file_path: Optional[str] = None,
                       directory: str = "") -> str:
        """Write the serialized document and return the path written"""
        record = self.get_document(file_id)
        if not file_path:
            file_name = f"modified_{record.name}" if record.name else "modified_file.xml"
            file_path = os.path.join(directory, file_name)

        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(self.xml_service.serialize_xml(record.data))
        return file_path

    def search(self, file_id: str, term: str, case_sensitive: bool = False) -> List[NodePath]:
        return self.xml_service.find_nodes(self.get_document(file_id).data, term, case_sensitive)

    def get_statistics(self, file_id: str) -> XmlStatistics:
        return self.xml_service.get_xml_statistics(self.get_document(file_id).data)

    def get_element(self, file_id: str, path: Sequence[int]) -> XmlElementNode:
        return resolve_element(self.get_document(file_id).data, path)
