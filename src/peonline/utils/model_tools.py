# peonline/utils/model_tools.py
"""
Tools for converting lxml elements into plain Python structures.

The PE-online data service returns datasets whose shape is only known at
runtime, so instead of mapping elements onto fixed Pydantic models this module
turns any element into a Node: either a leaf string or a mapping from child
name to Node (or list of Nodes when a name repeats).
"""

import logging
from collections.abc import Iterator
from typing import TypeAlias

from lxml import etree

logger: logging.Logger = logging.getLogger(__name__)

# A leaf string, or a named group of Nodes. Repeated child names hold a list.
Node: TypeAlias = 'str | dict[str, Node | list[Node]]'


def local_name(element: etree._Element) -> str:
    """
    Return the tag name of an element without its namespace.

    Example:
        >>> local_name(etree.fromstring('<s:Body xmlns:s="urn:x"/>'))
        'Body'
    """
    return etree.QName(element).localname


def iter_child_elements(element: etree._Element) -> Iterator[etree._Element]:
    """Iterate over the direct child elements, skipping comments and PIs."""
    for child in element:
        if isinstance(child.tag, str):
            yield child


def find_child(element: etree._Element, name: str) -> etree._Element | None:
    """Return the first direct child whose local name is name, or None."""
    for child in iter_child_elements(element):
        if local_name(child) == name:
            return child
    return None


def find_children(element: etree._Element, name: str) -> list[etree._Element]:
    """Return every direct child whose local name is name, in document order."""
    return [child for child in iter_child_elements(element) if local_name(child) == name]


def extract_text(element: etree._Element, tag: str, default: str = '') -> str:
    """
    Extract the text content of a direct child element.

    Note: This function performs NO type conversion and does not strip
    whitespace. Missing children and empty elements yield the default.

    Args:
        element: The parent XML element to search within.
        tag: The local name of the child to find.
        default: Value returned when the child is missing or empty.

    Returns:
        The child's text, or default.
    """
    child: etree._Element | None = find_child(element, tag)
    if child is None or child.text is None:
        return default
    return child.text


def extract_int(element: etree._Element, tag: str) -> int | None:
    """
    Extract the text of a direct child element as an integer.

    Returns:
        The parsed integer, or None if the child is missing or not numeric.
    """
    raw_value: str = extract_text(element, tag).strip()
    if not raw_value:
        return None

    try:
        return int(raw_value)
    except ValueError:
        logger.debug('Element <%s> is not an integer: %r', tag, raw_value)
        return None


def add_promoted(group: dict[str, 'Node | list[Node]'], key: str, value: Node) -> None:
    """
    Add a value to a group, promoting repeated keys to lists.

    absent -> store the bare value
    present as a single value -> replace with [existing, value]
    present as a list -> append

    Args:
        group: The mapping being accumulated. Modified in place.
        key: The child element name.
        value: The converted child.
    """
    if key not in group:
        group[key] = value
        return

    existing: Node | list[Node] = group[key]
    if isinstance(existing, list):
        existing.append(value)
    else:
        group[key] = [existing, value]


def element_to_node(element: etree._Element) -> Node:
    """
    Recursively convert an XML element into a Node.

    An element without child elements becomes its text (empty string when it
    has none). An element with children becomes a mapping built child by
    child, in document order, with add_promoted() deciding between a single
    value and a list per name.

    Args:
        element: The element to convert.

    Returns:
        A leaf string or a mapping of child names to Nodes.

    Example:
        >>> element_to_node(etree.fromstring('<row><a>1</a><a>2</a><b>x</b></row>'))
        {'a': ['1', '2'], 'b': 'x'}
    """
    children: list[etree._Element] = list(iter_child_elements(element))
    if not children:
        return element.text or ''

    group: dict[str, Node | list[Node]] = {}
    for child in children:
        add_promoted(group, local_name(child), element_to_node(child))
    return group


def attribute_name(element: etree._Element, qualified_name: str) -> str:
    """
    Turn an lxml attribute key back into its prefixed form.

    lxml reports namespaced attributes as '{uri}local'. This restores the
    'prefix:local' spelling used in the document when the prefix is known.
    """
    qname: etree.QName = etree.QName(qualified_name)
    if qname.namespace is None:
        return qname.localname

    for prefix, uri in element.nsmap.items():
        if uri == qname.namespace and prefix:
            return f'{prefix}:{qname.localname}'
    return qname.localname
