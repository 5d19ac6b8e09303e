# peonline/utils/xml_parser.py
"""
XML parsing utilities for PE-online responses.

Provides lenient parsing plus the detection predicates the normalizer relies
on. The legacy ASMX service is inconsistent about how it wraps its payloads,
so every detection rule lives in its own small function here: supporting a new
SOAP dialect means touching a predicate, not the conversion code.
"""

import logging

from lxml import etree

from .model_tools import iter_child_elements, local_name

logger: logging.Logger = logging.getLogger(__name__)

# Envelope namespaces for SOAP 1.1 and SOAP 1.2
SOAP_ENVELOPE_NAMESPACES: frozenset[str] = frozenset(
    {
        'http://schemas.xmlsoap.org/soap/envelope/',
        'http://www.w3.org/2003/05/soap-envelope',
    }
)

# Prefixes the service has been seen to use for the envelope
SOAP_ENVELOPE_PREFIXES: frozenset[str] = frozenset({'soap', 'SOAP-ENV'})

XML_SCHEMA_NAMESPACE: str = 'http://www.w3.org/2001/XMLSchema'
XML_SCHEMA_PREFIX: str = 'xs'

# Top-level elements that mark an attendance submission summary
SUMMARY_ELEMENT_NAMES: frozenset[str] = frozenset({'Results', 'Error', 'Accepted'})


def _build_parser(override_encoding: str | None = None) -> etree.XMLParser:
    # No DTD entity expansion, no network lookups: the input is untrusted.
    # huge_tree lifts the 10 MB text node limit; a SOAP-wrapped dataset travels
    # as a single escaped text node.
    # A fresh parser per call keeps parsing safe across threads.
    return etree.XMLParser(
        encoding=override_encoding,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )


def parse_xml(xml: str | bytes) -> etree._Element:
    """
    Parse an XML document into an lxml Element.

    Text input is encoded as UTF-8 and parsed as such, regardless of the
    encoding its declaration claims. ASMX services routinely embed documents
    declaring encoding="utf-16" as escaped text inside a UTF-8 envelope.

    Args:
        xml: The raw XML, as text or bytes.

    Returns:
        The root element of the parsed XML tree.

    Raises:
        etree.XMLSyntaxError: If the XML is malformed or empty.
    """
    if isinstance(xml, str):
        return etree.fromstring(xml.encode('utf-8'), parser=_build_parser('utf-8'))
    return etree.fromstring(xml, parser=_build_parser())


def try_parse_xml(xml: str | bytes) -> etree._Element | None:
    """
    Parse an XML document, returning None instead of raising.

    Args:
        xml: The raw XML, as text or bytes.

    Returns:
        The root element, or None if the input is not well-formed XML.
    """
    try:
        return parse_xml(xml)
    except (etree.XMLSyntaxError, ValueError) as parse_error:
        logger.debug('Input is not well-formed XML: %r', parse_error)
        return None


def serialize_xml(element: etree._Element) -> str:
    """Serialize an element (and its subtree) back to an XML string."""
    return etree.tostring(element, encoding='unicode')


def declared_namespaces(root: etree._Element) -> dict[str, str]:
    """
    Collect every prefix -> URI mapping declared anywhere in the document.

    Args:
        root: The root element of the document.

    Returns:
        Mapping of namespace prefix (None for the default namespace) to URI.
    """
    namespaces: dict[str, str] = {}
    for element in root.iter(tag=etree.Element):
        for prefix, uri in element.nsmap.items():
            namespaces.setdefault(prefix, uri)
    return namespaces


def is_soap_envelope(root: etree._Element) -> bool:
    """
    Check if a document is a SOAP envelope.

    The document counts as SOAP-wrapped if any declared namespace is a SOAP
    envelope URI, or uses one of the prefixes the service aliases it with.

    Args:
        root: The root element of the document.

    Returns:
        True if the document declares a SOAP envelope namespace.
    """
    for prefix, uri in declared_namespaces(root).items():
        if uri in SOAP_ENVELOPE_NAMESPACES or prefix in SOAP_ENVELOPE_PREFIXES:
            return True
    return False


def is_soap_body(element: etree._Element) -> bool:
    """
    Check if an envelope child is the Body element.

    Matches on a case-insensitive substring of the local name rather than the
    exact name, because ASMX service elements can carry 'Body' inside longer
    names.
    """
    return 'body' in local_name(element).lower()


def find_soap_body(root: etree._Element) -> etree._Element | None:
    """
    Find the Body element among the direct children of a SOAP envelope.

    Args:
        root: The envelope element.

    Returns:
        The first matching child, or None if the envelope has no body.
    """
    for child in iter_child_elements(root):
        if is_soap_body(child):
            return child
    return None


def _direct_text(element: etree._Element) -> str:
    # Own text plus the tails of its children, so a comment in front of the
    # payload does not hide it. Text of nested elements is not included.
    return (element.text or '') + ''.join(child.tail or '' for child in element)


def extract_inner_payload(root: etree._Element) -> str | None:
    """
    Extract the result payload string carried inside a SOAP envelope.

    ASMX operations answer with Body -> <Operation>Response -> <Operation>Result,
    where the result element holds the real XML document as escaped text.
    This walks every operation element in the body and returns the text of the
    first grandchild whose own text (comments skipped) is not blank. It stops
    there: multiple result parts are never aggregated.

    Args:
        root: The envelope element.

    Returns:
        The payload text as found in the document, or None if the body is
        missing or no grandchild carries text.
    """
    body: etree._Element | None = find_soap_body(root)
    if body is None:
        logger.warning('SOAP envelope has no Body element')
        return None

    for operation in iter_child_elements(body):
        if local_name(operation) == 'Fault':
            logger.warning('SOAP envelope carries a Fault element')

        for result in iter_child_elements(operation):
            text: str = _direct_text(result)
            if text.strip():
                logger.debug(
                    'Found SOAP payload in <%s>/<%s>',
                    local_name(operation),
                    local_name(result),
                )
                return text

    return None


def is_schema_element(element: etree._Element) -> bool:
    """
    Check if an element is an embedded XML schema (or part of one).

    Matches elements in the XML Schema namespace and, for services that
    forget the declaration, anything using the 'xs' alias.
    """
    if etree.QName(element).namespace == XML_SCHEMA_NAMESPACE:
        return True
    if element.prefix == XML_SCHEMA_PREFIX:
        return True
    return local_name(element).startswith(f'{XML_SCHEMA_PREFIX}:')


def find_schema_element(root: etree._Element) -> etree._Element | None:
    """Return the first top-level schema element of a dataset, if any."""
    for child in iter_child_elements(root):
        if is_schema_element(child):
            return child
    return None


def is_summary_document(root: etree._Element) -> bool:
    """
    Check if a document is an attendance submission summary.

    Classification is by shape: a summary has at least one top-level
    Results, Error or Accepted element. Anything else is treated as a dataset.
    """
    return any(
        local_name(child) in SUMMARY_ELEMENT_NAMES
        for child in iter_child_elements(root)
    )
