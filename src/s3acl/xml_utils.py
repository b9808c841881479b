"""S3 XML helpers shared by the ACL codec and error translation."""

from xml.etree import ElementTree
from xml.sax.saxutils import escape as _sax_escape

# S3 XML namespace
S3_XMLNS = "http://s3.amazonaws.com/doc/2006-03-01/"
XSI_XMLNS = "http://www.w3.org/2001/XMLSchema-instance"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_NS = f"{{{S3_XMLNS}}}"


def escape_xml(value: str) -> str:
    """Escape special XML characters in a string value.

    Args:
        value: The raw string to escape.

    Returns:
        The XML-safe escaped string.
    """
    return _sax_escape(str(value))


def local_name(elem: ElementTree.Element) -> str:
    """Return the tag of an element with any namespace stripped."""
    tag = elem.tag
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def find_elem(parent: ElementTree.Element, name: str) -> ElementTree.Element | None:
    """Find a child element, trying the S3-namespaced name first, then bare.

    Uses explicit ``is not None`` checks to avoid ElementTree's deprecated
    truth-value testing of elements.

    Args:
        parent: The parent XML element to search.
        name: The element name without namespace.

    Returns:
        The found element, or None.
    """
    elem = parent.find(f"{_NS}{name}")
    if elem is not None:
        return elem
    return parent.find(name)


def find_all(parent: ElementTree.Element, name: str) -> list[ElementTree.Element]:
    """Find all children named ``name``, namespaced or bare, in document order."""
    return [child for child in parent if local_name(child) == name]


def find_text(parent: ElementTree.Element, name: str) -> str:
    """Return the stripped text of a child element, or "" when absent."""
    elem = find_elem(parent, name)
    if elem is None or elem.text is None:
        return ""
    return elem.text.strip()
