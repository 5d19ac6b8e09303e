# peonline/normalizer.py
"""
Response normalization for the PE-online webservice.

The service answers in one of several shapes:

1. Plain XML: the document itself is the payload.
2. SOAP envelope: Body -> <Operation>Response -> <Operation>Result, with the
   real document carried as escaped text inside the result element.
3. Either of the above, where the payload is a submission summary
   (Results / Error / Accepted) or a dataset (optional xs:schema + rows).

normalize_response() turns any of them into one of the models in
peonline.response_models. It never raises on bad input: a body that is not
XML, or a SOAP payload that is not XML, comes back as a fallback model.
The function is pure; it does no I/O and keeps no state.
"""

import logging

from lxml import etree

from peonline.response_models import (
    DatasetResponse,
    NormalizedResponse,
    RawResponse,
    ResponseKind,
    ResultResponse,
    SummaryResponse,
)
from peonline.utils import (
    extract_inner_payload,
    is_soap_envelope,
    is_summary_document,
    serialize_xml,
    try_parse_xml,
)

logger: logging.Logger = logging.getLogger(__name__)


def classify_document(root: etree._Element) -> ResponseKind:
    """Decide by shape whether a payload document is a summary or a dataset."""
    return ResponseKind.SUMMARY if is_summary_document(root) else ResponseKind.DATASET


def normalize_response(
    body: str | bytes,
    expected_kind: ResponseKind | None = None,
) -> NormalizedResponse:
    """
    Normalize a raw webservice response body.

    Args:
        body: The HTTP response body, as text or bytes.
        expected_kind: ResponseKind.SUMMARY or ResponseKind.DATASET to force
                       the extraction used for the payload. If None, the
                       payload's shape decides.

    Returns:
        - SummaryResponse or DatasetResponse for an XML payload,
        - RawResponse if the body is not XML (raw is body, untouched),
        - ResultResponse if a SOAP envelope carries no payload (result is
          empty, raw_xml holds the envelope) or a payload that is not XML
          (result holds the payload).

    Example:
        >>> response = normalize_response(http_response.content)
        >>> if isinstance(response, SummaryResponse):
        ...     print(response.counts.accepted)
    """
    # ========================================================================
    # STEP 1: Parse the body
    # ========================================================================
    root: etree._Element | None = try_parse_xml(body)
    if root is None:
        logger.warning('Response body is not XML; returning it unparsed')
        return RawResponse(raw=body)

    # ========================================================================
    # STEP 2: Unwrap the SOAP envelope, if any
    # ========================================================================
    content: etree._Element = root
    if is_soap_envelope(root):
        logger.debug('Response is SOAP-enveloped; extracting payload')

        payload: str | None = extract_inner_payload(root)
        if payload is None:
            logger.warning('SOAP envelope carries no payload')
            return ResultResponse(result='', raw_xml=serialize_xml(root))

        # STEP 3: The payload is a document of its own
        inner_root: etree._Element | None = try_parse_xml(payload.strip())
        if inner_root is None:
            logger.warning('SOAP payload is not XML; returning it as text')
            return ResultResponse(result=payload)
        content = inner_root

    # ========================================================================
    # STEP 4: Extract by kind
    # ========================================================================
    kind: ResponseKind = expected_kind or classify_document(content)
    logger.debug('Normalizing payload <%s> as %s', content.tag, kind)

    if kind is ResponseKind.SUMMARY:
        return SummaryResponse.from_xml_element(content)
    return DatasetResponse.from_xml_element(content)
