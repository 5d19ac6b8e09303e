# peonline/response_models/summary_response.py
"""
Pydantic models for the ProcessXML submission summary.

The attendance service answers every submission with a summary document:

    <Summary>
      <Results>
        <total_rows>10</total_rows>
        <accepted_rows>8</accepted_rows>
        <rejected_rows>2</rejected_rows>
      </Results>
      <Error><errorNR>E1</errorNR><errorMsg>bad row</errorMsg></Error>
      <Accepted>
        <person>P1</person><course>C1</course><meeting>M1</meeting><date>2024-01-01</date>
      </Accepted>
    </Summary>

Rejected rows are reported with HTTP 200, so the caller has to look at
errors / counts to know whether a submission went through.
"""

import logging
from typing import ClassVar

from lxml import etree
from pydantic import BaseModel, Field

from ..utils.model_tools import extract_int, extract_text, find_child, find_children
from ..utils.xml_parser import serialize_xml
from .base import NormalizedResponseBase, ResponseKind

logger: logging.Logger = logging.getLogger(__name__)


class RowCounts(BaseModel):
    """
    Row counters from the <Results> element.

    All counters stay None unless <Results> reports rejected_rows; a
    counter that is missing or not numeric is None as well.
    """

    total: int | None = None
    accepted: int | None = None
    rejected: int | None = None

    @classmethod
    def from_xml_element(cls, element: etree._Element | None) -> 'RowCounts':
        """Read the counters from a <Results> element (or its absence)."""
        if element is None or find_child(element, 'rejected_rows') is None:
            return cls()

        return cls(
            total=extract_int(element, 'total_rows'),
            accepted=extract_int(element, 'accepted_rows'),
            rejected=extract_int(element, 'rejected_rows'),
        )


class SubmissionError(BaseModel):
    """One <Error> entry: the service's error number and message."""

    code: str = ''
    message: str = ''

    @classmethod
    def from_xml_element(cls, element: etree._Element) -> 'SubmissionError':
        return cls(
            code=extract_text(element, 'errorNR'),
            message=extract_text(element, 'errorMsg'),
        )


class AcceptedAttendance(BaseModel):
    """One <Accepted> entry. Missing fields are empty strings."""

    person: str = ''
    course: str = ''
    meeting: str = ''
    date: str = ''

    @classmethod
    def from_xml_element(cls, element: etree._Element) -> 'AcceptedAttendance':
        return cls(
            person=extract_text(element, 'person'),
            course=extract_text(element, 'course'),
            meeting=extract_text(element, 'meeting'),
            date=extract_text(element, 'date'),
        )


class SummaryResponse(NormalizedResponseBase):
    """
    Normalized submission summary.

    Attributes:
        counts: Row counters from <Results>.
        errors: Every <Error> entry, in document order.
        accepted: Every <Accepted> entry, in document order.
        raw_xml: The summary document, serialized.
    """

    kind: ClassVar[ResponseKind] = ResponseKind.SUMMARY

    counts: RowCounts = Field(default_factory=RowCounts)
    errors: list[SubmissionError] = Field(default_factory=list)
    accepted: list[AcceptedAttendance] = Field(default_factory=list)
    raw_xml: str = Field('', alias='rawXml')

    @classmethod
    def from_xml_element(cls, root: etree._Element) -> 'SummaryResponse':
        """
        Extract a summary from the root element of a summary document.

        Never raises on unexpected shapes: whatever is missing is simply
        reported as absent or empty.

        Args:
            root: The summary document's root element.

        Returns:
            The normalized summary.

        Example:
            >>> root = parse_xml('<Summary><Error><errorNR>E1</errorNR></Error></Summary>')
            >>> SummaryResponse.from_xml_element(root).errors
            [SubmissionError(code='E1', message='')]
        """
        counts: RowCounts = RowCounts.from_xml_element(find_child(root, 'Results'))
        errors: list[SubmissionError] = [
            SubmissionError.from_xml_element(element)
            for element in find_children(root, 'Error')
        ]
        accepted: list[AcceptedAttendance] = [
            AcceptedAttendance.from_xml_element(element)
            for element in find_children(root, 'Accepted')
        ]

        logger.info(
            'Parsed submission summary: %d accepted entries, %d errors',
            len(accepted),
            len(errors),
        )

        return cls(
            counts=counts,
            errors=errors,
            accepted=accepted,
            raw_xml=serialize_xml(root),
        )

    @property
    def succeeded(self) -> bool:
        """True when the service reported no errors and no rejected rows."""
        return not self.errors and not self.counts.rejected

    def __repr__(self) -> str:
        return (
            f'SummaryResponse('
            f'total={self.counts.total}, '
            f'accepted={self.counts.accepted}, '
            f'rejected={self.counts.rejected}, '
            f'errors={len(self.errors)})'
        )
