# peonline/response_models/__init__.py
"""
Response models for PE-online webservice operations.

Every response body is normalized into one of these models. Which one depends
on the body's shape, not on the operation that produced it.
"""

from peonline.response_models.base import NormalizedResponseBase, ResponseKind
from peonline.response_models.dataset_response import DatasetResponse, parse_schema
from peonline.response_models.fallback_response import RawResponse, ResultResponse
from peonline.response_models.summary_response import (
    AcceptedAttendance,
    RowCounts,
    SubmissionError,
    SummaryResponse,
)

NormalizedResponse = SummaryResponse | DatasetResponse | RawResponse | ResultResponse

__all__: list[str] = [
    # summary_response.py
    'AcceptedAttendance',
    # dataset_response.py
    'DatasetResponse',
    'NormalizedResponse',
    # base.py
    'NormalizedResponseBase',
    # fallback_response.py
    'RawResponse',
    'ResponseKind',
    'ResultResponse',
    'RowCounts',
    'SubmissionError',
    'SummaryResponse',
    'parse_schema',
]
