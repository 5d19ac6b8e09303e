# peonline/response_models/fallback_response.py
"""
Fallback results for bodies the normalizer could not make sense of.

The webservice is legacy and inconsistently shaped. Rather than failing, the
normalizer hands back what it got so the caller can inspect it.
"""

from typing import ClassVar

from pydantic import Field

from .base import NormalizedResponseBase, ResponseKind


class RawResponse(NormalizedResponseBase):
    """The body was not XML at all. raw is the body exactly as received."""

    kind: ClassVar[ResponseKind] = ResponseKind.RAW

    raw: bytes | str

    def __repr__(self) -> str:
        return f'RawResponse(length={len(self.raw)})'


class ResultResponse(NormalizedResponseBase):
    """
    A SOAP envelope whose payload could not be normalized.

    Attributes:
        result: The payload text found in the envelope, when it was not XML.
                Empty when the envelope carried no payload at all.
        raw_xml: The serialized envelope when no payload was found.
    """

    kind: ClassVar[ResponseKind] = ResponseKind.RESULT

    result: str = ''
    raw_xml: str | None = Field(None, alias='rawXml')
