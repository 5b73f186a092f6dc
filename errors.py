"""
Exceptions raised by the XML editing core
"""

from typing import Optional, Sequence, Tuple


class XmlEditorError(Exception):
    """Base class for editor errors"""


class ParseError(XmlEditorError):
    """Input text is not a well-formed XML document"""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self):
        if self.line > 0 and self.column > 0:
            return f"Line {self.line}, Column {self.column}: {self.message}"
        elif self.line > 0:
            return f"Line {self.line}: {self.message}"
        return self.message


class PathError(XmlEditorError):
    """A node path does not resolve against the current tree"""

    def __init__(self, message: str, path: Sequence[int] = ()):
        super().__init__(message)
        self.message = message
        self.path: Tuple[int, ...] = tuple(path)

    def __str__(self):
        return f"{self.message} (path: {list(self.path)})"


class ValidationError(XmlEditorError):
    """An attribute value was rejected by its parameter description"""

    def __init__(self, message: str, attribute_name: str = "", value: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.attribute_name = attribute_name
        self.value = value

    def __str__(self):
        if self.attribute_name:
            return f"{self.attribute_name}: {self.message}"
        return self.message
