# peonline/validation.py
"""
Pre-flight validation for attendance submissions.

AttendanceClient.submit_attendance() always runs these checks before it
builds the payload, so an invalid request never reaches the network.
"""

import logging
from datetime import UTC, date, datetime

from peonline.exceptions import ValidationCode, ValidationException
from peonline.models import AttendanceRequest
from peonline.utils import parse_end_date

logger: logging.Logger = logging.getLogger(__name__)


def _is_in_future(end_date: str, now: datetime) -> bool:
    parsed: date | datetime | None = parse_end_date(end_date)

    if parsed is None:
        # Not ISO 8601: passed through to the service unchecked
        logger.debug('endDate %r is not ISO 8601; skipping future check', end_date)
        return False

    if isinstance(parsed, datetime):
        return parsed > now

    return parsed > now.astimezone(UTC).date()


def validate_attendance_request(
    request: AttendanceRequest,
    now: datetime | None = None,
) -> None:
    """
    Check that an attendance request can be submitted.

    Checks run in this order and the first failure wins:
    1. org id present (and non-zero)            -> 1001
    2. end date not after now                   -> 1002
    3. course identifier present (either kind)  -> 1003
    4. person identifier present (either kind)  -> 1004

    An id of 0 or a blank external id does not count as present.

    Date-only end dates are compared by calendar day in UTC, timestamps are
    compared as instants (naive ones are taken as UTC).

    Args:
        request: The request to check.
        now: Reference time for the future check. Defaults to the current
             UTC time.

    Raises:
        ValidationException: With the code of the first failed check.
    """
    current_time: datetime = now or datetime.now(UTC)
    if current_time.tzinfo is None:
        current_time = current_time.replace(tzinfo=UTC)

    if not request.org_id:
        raise ValidationException('orgId is required', ValidationCode.ORG_ID_MISSING)

    if _is_in_future(request.end_date, current_time):
        raise ValidationException(
            'endDate cannot be in the future', ValidationCode.END_DATE_IN_FUTURE
        )

    if request.course_ref is None:
        raise ValidationException(
            'Either peCourseId or externalCourseId must be provided',
            ValidationCode.COURSE_MISSING,
        )

    if request.person_ref is None:
        raise ValidationException(
            'Either pePersonId or externalPersonId must be provided',
            ValidationCode.PERSON_MISSING,
        )

    logger.debug('Attendance request passed validation')
