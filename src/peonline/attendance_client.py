# peonline/attendance_client.py
"""
PE-online Attendance Client

This module provides a high-level client for submitting attendance records to
the PE-online WriteAttendance ASMX webservice (ProcessXML operation). It
handles request validation, payload construction and response normalization.
"""

import logging
from pathlib import Path

import requests

from peonline.models import AttendanceRequest
from peonline.normalizer import normalize_response
from peonline.request_builder import build_entry_xml
from peonline.response_models import NormalizedResponse, ResponseKind
from peonline.utils import AttendanceSection, PeOnlineConfig, load_config, post_form
from peonline.validation import validate_attendance_request

# Set up module-level logger
logger: logging.Logger = logging.getLogger(__name__)


class AttendanceClient:
    """
    Client for the PE-online attendance submission service.

    Every submission is independent: the client keeps no session and only
    holds its (read-only) configuration, so one instance may be shared.

    Attributes:
        config: The full configuration object.
        attendance_config: The 'attendance' section (endpoint and credentials).

    Usage:
        >>> client = AttendanceClient(Path('/etc/peonline/config.yaml'))
        >>> request = AttendanceRequest(
        ...     org_id=1234567,
        ...     end_date='2024-09-27',
        ...     pe_course_id=123456,
        ...     external_person_id='BIG-123456',
        ... )
        >>> summary = client.submit_attendance(request)
        >>> summary.counts.accepted
        1
    """

    def __init__(
        self, config_path: Path | None = None, config: PeOnlineConfig | None = None
    ) -> None:
        """
        Initialize the client with configuration.

        Args:
            config_path: Optional path to the configuration file.
                        If None, uses the default configuration location
                        as defined in load_config().
            config: Optional pre-loaded PeOnlineConfig instance. If provided,
                   config_path is ignored.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the configuration has no 'attendance' section.
        """
        if config is not None:
            self.config: PeOnlineConfig = config
            logger.debug('Initializing AttendanceClient with injected configuration')
        elif config_path is not None:
            logger.info('Loading PE-online configuration from: %r', config_path)
            self.config = load_config(config_path)
        else:
            logger.info('Loading PE-online configuration from default location')
            self.config = load_config()

        if self.config.attendance is None:
            error_message: str = "Configuration has no 'attendance' section"
            logger.error(error_message)
            raise ValueError(error_message)

        self.attendance_config: AttendanceSection = self.config.attendance
        logger.debug(
            'AttendanceClient ready for endpoint %r', str(self.attendance_config.endpoint_url)
        )

    def build_payload(self, request: AttendanceRequest) -> str:
        """
        Build the <Entry> XML for a request using the configured credentials.

        Args:
            request: The attendance to submit.

        Returns:
            The XML document sent as the sXML form field.
        """
        return build_entry_xml(
            request,
            self.attendance_config.user_id,
            self.attendance_config.user_key.get_secret_value(),
            self.attendance_config.org_id,
        )

    def submit_attendance(self, request: AttendanceRequest) -> NormalizedResponse:
        """
        Validate and submit a single attendance record.

        This method:
        1. Validates the request (always; an invalid request is never sent)
        2. Builds the <Entry> XML payload
        3. POSTs it as the sXML form field
        4. Normalizes the returned summary

        Args:
            request: The attendance to submit.

        Returns:
            A SummaryResponse with the row counts, errors and accepted entries.
            If the service answers with something that is not a summary
            document, a RawResponse or ResultResponse with the body.

        Raises:
            ValidationException: If the request fails validation.
            ApiException: If the HTTP request fails.
        """
        logger.info('Submitting attendance via %r', AttendanceRequest.operation_name)

        validate_attendance_request(request)

        entry_xml: str = self.build_payload(request)

        response: requests.Response = post_form(
            str(self.attendance_config.endpoint_url),
            {'sXML': entry_xml},
            self.config.client,
            AttendanceRequest.operation_name,
        )

        return normalize_response(response.content, expected_kind=ResponseKind.SUMMARY)

    def __repr__(self) -> str:
        return (
            f'AttendanceClient('
            f'endpoint={self.attendance_config.endpoint_url}, '
            f'org_id={self.attendance_config.org_id}'
            f')'
        )
