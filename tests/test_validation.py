"""Tests for attendance request validation."""

from datetime import UTC, datetime

import pytest

from peonline.exceptions import ValidationCode, ValidationException
from peonline.models import AttendanceRequest
from peonline.validation import validate_attendance_request

NOW: datetime = datetime(2024, 9, 27, 12, 0, tzinfo=UTC)


class TestValidateAttendanceRequest:
    """Tests for validate_attendance_request."""

    def test_valid_request_passes(self, valid_request: AttendanceRequest) -> None:
        """Test that a complete request raises nothing."""
        validate_attendance_request(valid_request, now=NOW)

    def test_missing_org_id(self) -> None:
        """Test that a request without org id fails with 1001."""
        request = AttendanceRequest(
            end_date='2024-09-27', pe_course_id=1, external_person_id='P'
        )

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.ORG_ID_MISSING
        assert exc_info.value.code == 1001  # noqa: PLR2004
        assert exc_info.value.message == 'orgId is required'

    def test_zero_org_id_counts_as_missing(self) -> None:
        """Test that org id 0 is rejected like a missing one."""
        request = AttendanceRequest(
            org_id=0, end_date='2024-09-27', pe_course_id=1, external_person_id='P'
        )

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.ORG_ID_MISSING

    def test_future_date_only_end_date(self) -> None:
        """Test that a date after today fails with 1002."""
        request = AttendanceRequest(
            org_id=1, end_date='2024-09-28', pe_course_id=1, external_person_id='P'
        )

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.END_DATE_IN_FUTURE
        assert exc_info.value.message == 'endDate cannot be in the future'

    def test_today_date_only_end_date_passes(self) -> None:
        """Test that today's date is not in the future, whatever the time of day."""
        request = AttendanceRequest(
            org_id=1, end_date='2024-09-27', pe_course_id=1, external_person_id='P'
        )

        validate_attendance_request(request, now=datetime(2024, 9, 27, 0, 1, tzinfo=UTC))

    def test_future_timestamp_end_date(self) -> None:
        """Test that timestamps are compared as instants."""
        request = AttendanceRequest(
            org_id=1,
            end_date='2024-09-27T13:00:00+00:00',
            pe_course_id=1,
            external_person_id='P',
        )

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.END_DATE_IN_FUTURE

    def test_timestamp_with_offset_in_the_past(self) -> None:
        """Test that the offset is honored (13:00+02:00 is 11:00 UTC)."""
        request = AttendanceRequest(
            org_id=1,
            end_date='2024-09-27T13:00:00+02:00',
            pe_course_id=1,
            external_person_id='P',
        )

        validate_attendance_request(request, now=NOW)

    def test_unparseable_end_date_is_not_checked(self) -> None:
        """Test that non ISO 8601 values skip the future check."""
        request = AttendanceRequest(
            org_id=1, end_date='27.09.2999', pe_course_id=1, external_person_id='P'
        )

        validate_attendance_request(request, now=NOW)

    def test_naive_now_is_taken_as_utc(self) -> None:
        """Test that a naive reference time does not break the comparison."""
        request = AttendanceRequest(
            org_id=1,
            end_date='2024-09-27T13:00:00+00:00',
            pe_course_id=1,
            external_person_id='P',
        )

        with pytest.raises(ValidationException):
            validate_attendance_request(request, now=datetime(2024, 9, 27, 12, 0))

    def test_missing_course(self) -> None:
        """Test that a request without any course id fails with 1003."""
        request = AttendanceRequest(org_id=1, end_date='2024-09-27', external_person_id='P')

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.COURSE_MISSING

    def test_external_course_is_enough(self) -> None:
        """Test that the external course id satisfies the course check."""
        request = AttendanceRequest(
            org_id=1, end_date='2024-09-27', external_course_id='C', pe_person_id=9
        )

        validate_attendance_request(request, now=NOW)

    def test_missing_person(self) -> None:
        """Test that a request without any person id fails with 1004."""
        request = AttendanceRequest(org_id=1, end_date='2024-09-27', pe_course_id=1)

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.PERSON_MISSING

    def test_first_failure_wins(self) -> None:
        """Test that the org id check runs before everything else."""
        request = AttendanceRequest(end_date='2999-01-01')

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.ORG_ID_MISSING

    def test_future_date_reported_before_missing_identifiers(self) -> None:
        """Test that 1002 is reported before 1003 and 1004."""
        request = AttendanceRequest(org_id=1, end_date='2999-01-01')

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.END_DATE_IN_FUTURE

    @pytest.mark.parametrize(
        ('course', 'code'),
        [
            ({'pe_course_id': 0}, ValidationCode.COURSE_MISSING),
            ({'external_course_id': ''}, ValidationCode.COURSE_MISSING),
            ({'external_course_id': '   '}, ValidationCode.COURSE_MISSING),
        ],
    )
    def test_empty_course_id_counts_as_missing(
        self, course: dict[str, int | str], code: ValidationCode
    ) -> None:
        """Test that 0 and blank course ids fail with 1003."""
        request = AttendanceRequest(
            org_id=1, end_date='2024-01-01', external_person_id='P', **course
        )

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == code

    @pytest.mark.parametrize('person', [{'pe_person_id': 0}, {'external_person_id': ''}])
    def test_empty_person_id_counts_as_missing(self, person: dict[str, int | str]) -> None:
        """Test that 0 and blank person ids fail with 1004."""
        request = AttendanceRequest(org_id=1, end_date='2024-01-01', pe_course_id=1, **person)

        with pytest.raises(ValidationException) as exc_info:
            validate_attendance_request(request, now=NOW)

        assert exc_info.value.code == ValidationCode.PERSON_MISSING

    def test_empty_internal_id_falls_back_to_external(self) -> None:
        """Test that an unusable internal id does not hide a valid external one."""
        request = AttendanceRequest(
            org_id=1,
            end_date='2024-01-01',
            pe_course_id=0,
            external_course_id='C-1',
            external_person_id='',
            pe_person_id=9,
        )

        validate_attendance_request(request, now=NOW)
