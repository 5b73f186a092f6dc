"""
XML Service - conversion between XML text and the editable tree
"""

from typing import List, Optional

from xml.sax.saxutils import escape

from lxml import etree

from errors import ParseError
from models import XmlElementNode, XmlCommentNode, XmlNode, NodePath, XmlStatistics
from tree_paths import walk_tree

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
INDENT = "  "

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Characters the parser would normalize away inside attribute values
_ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}
_TEXT_ENTITIES = {"\r": "&#13;"}


def is_valid_xml_name(name: str) -> bool:
    """True for a tag or attribute name that survives a parse, prefix included"""
    parts = name.split(":")
    if len(parts) > 2:
        return False
    try:
        for part in parts:
            etree.Element(part)
    except ValueError:
        return False
    return True


class XmlService:
    """Service for XML processing operations"""

    def parse_xml(self, xml_content: str) -> XmlElementNode:
        """Parse XML content into a tree.

        Comments inside elements become XmlCommentNode children; comments
        outside the root element are kept in the root's ``root_comments``.

        Raises:
            ParseError: the content is not well-formed XML
        """
        # Remove BOM if present
        if xml_content.startswith('\ufeff'):
            xml_content = xml_content[1:]

        if not xml_content.strip():
            raise ParseError("Document is empty")

        # The text is already decoded, so override whatever the declaration says
        parser = etree.XMLParser(
            encoding='utf-8',
            remove_comments=False,
            remove_pis=True,
            resolve_entities=False,
        )
        try:
            root = etree.fromstring(xml_content.encode('utf-8'), parser)
        except etree.XMLSyntaxError as e:
            raise ParseError(e.msg or "Invalid XML format", e.lineno or 0, e.offset or 0) from e
        except ValueError as e:
            raise ParseError(f"Invalid XML format: {e}") from e

        if root is None:
            raise ParseError("Invalid XML format")

        node = self._element_to_node(root)
        return XmlElementNode(
            tag_name=node.tag_name,
            attributes=node.attributes,
            children=node.children,
            text_content=node.text_content,
            root_comments=self._collect_root_comments(root),
        )

    def _collect_root_comments(self, root) -> List[str]:
        """Comments before the root element, then any after it"""
        before = []
        sibling = root.getprevious()
        while sibling is not None:
            if sibling.tag is etree.Comment:
                before.append(sibling.text or "")
            sibling = sibling.getprevious()
        before.reverse()

        after = []
        sibling = root.getnext()
        while sibling is not None:
            if sibling.tag is etree.Comment:
                after.append(sibling.text or "")
            sibling = sibling.getnext()

        return before + after

    def _element_to_node(self, element) -> XmlElementNode:
        """Convert an lxml element (and its subtree) to a tree node"""
        attributes = self._namespace_declarations(element)
        for key, value in element.attrib.items():
            attributes[self._qualified_name(element, key)] = value

        children: List[XmlNode] = []
        text_parts = []
        if element.text and element.text.strip():
            text_parts.append(element.text.strip())

        for child in element:
            if child.tag is etree.Comment:
                children.append(XmlCommentNode(comment_text=child.text or ""))
            elif isinstance(child.tag, str):
                children.append(self._element_to_node(child))
            # Entity references and other node kinds are dropped, their tails are not
            if child.tail and child.tail.strip():
                text_parts.append(child.tail.strip())

        return XmlElementNode(
            tag_name=self._qualified_name(element, element.tag),
            attributes=attributes,
            children=children,
            text_content="".join(text_parts),
        )

    def _qualified_name(self, element, name: str) -> str:
        """Turn lxml's '{uri}local' names back into 'prefix:local'"""
        qname = etree.QName(name)
        if qname.namespace is None:
            return qname.localname
        if qname.namespace == XML_NAMESPACE:
            return f"xml:{qname.localname}"
        if name == element.tag:
            if element.prefix:
                return f"{element.prefix}:{qname.localname}"
            return qname.localname
        for prefix, uri in element.nsmap.items():
            if uri == qname.namespace and prefix:
                return f"{prefix}:{qname.localname}"
        return qname.localname

    def _namespace_declarations(self, element) -> dict:
        """xmlns attributes introduced on this element"""
        parent = element.getparent()
        inherited = parent.nsmap if parent is not None else {}
        declarations = {}
        for prefix, uri in element.nsmap.items():
            if inherited.get(prefix) != uri:
                declarations["xmlns" if prefix is None else f"xmlns:{prefix}"] = uri
        return declarations

    def serialize_xml(self, root: XmlElementNode) -> str:
        """Render a tree as indented XML text with an XML declaration"""
        return f"{XML_DECLARATION}\n{self._node_to_xml(root, 0)}"

    def _node_to_xml(self, node: XmlNode, depth: int) -> str:
        indent = INDENT * depth

        if node.is_comment:
            return f"{indent}<!--{node.comment_text}-->\n"

        result = [f"{indent}<{node.tag_name}"]
        for key, value in node.attributes.items():
            result.append(f' {key}="{escape(value, _ATTRIBUTE_ENTITIES)}"')

        if not node.children and not node.text_content:
            result.append(" />\n")
        else:
            result.append(">")
            if node.children:
                result.append("\n")
                for child in node.children:
                    result.append(self._node_to_xml(child, depth + 1))
                result.append(indent)
            else:
                result.append(escape(node.text_content, _TEXT_ENTITIES))
            result.append(f"</{node.tag_name}>\n")

        if depth == 0:
            for comment in node.root_comments:
                result.append(f"<!--{comment}-->\n")

        return "".join(result)

    def get_xml_statistics(self, root: XmlElementNode) -> XmlStatistics:
        """Get XML statistics"""
        element_count = 0
        attribute_count = 0
        text_node_count = 0
        comment_count = len(root.root_comments)

        for _, node in walk_tree(root):
            if node.is_comment:
                comment_count += 1
                continue
            element_count += 1
            attribute_count += len(node.attributes)
            if node.text_content:
                text_node_count += 1

        return XmlStatistics(
            element_count=element_count,
            attribute_count=attribute_count,
            text_node_count=text_node_count,
            comment_count=comment_count,
            total_size=len(self.serialize_xml(root).encode('utf-8')),
        )

    def find_nodes(self, root: XmlElementNode, term: str, case_sensitive: bool = False) -> List[NodePath]:
        """Paths of elements whose tag, attributes or text contain ``term``"""
        if not term:
            return []
        needle = term if case_sensitive else term.lower()

        def matches(value: Optional[str]) -> bool:
            if not value:
                return False
            haystack = value if case_sensitive else value.lower()
            return needle in haystack

        found = []
        for path, node in walk_tree(root):
            if node.is_comment:
                continue
            if (matches(node.tag_name)
                    or matches(node.text_content)
                    or any(matches(key) or matches(value) for key, value in node.attributes.items())):
                found.append(path)
        return found
