# peonline/__init__.py

from .attendance_client import AttendanceClient
from .data_request_client import DataRequestClient
from .exceptions import ApiException, PeOnlineError, ValidationCode, ValidationException
from .models import AttendanceRequest, DataRequestOptions, ExternalId, InternalId
from .normalizer import normalize_response

__all__: list[str] = [
    # exceptions.py
    'ApiException',
    # attendance_client.py
    'AttendanceClient',
    # models.py
    'AttendanceRequest',
    # data_request_client.py
    'DataRequestClient',
    'DataRequestOptions',
    'ExternalId',
    'InternalId',
    'PeOnlineError',
    'ValidationCode',
    'ValidationException',
    # normalizer.py
    'normalize_response',
]
