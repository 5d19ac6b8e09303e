"""Tests for the wire payload builders."""

import re
from urllib.parse import parse_qs

import pytest
from lxml import etree

from peonline.models import AttendanceRequest
from peonline.request_builder import (
    attendance_fields,
    build_data_request_form,
    build_entry_xml,
)
from peonline.utils import parse_xml


def _build(request: AttendanceRequest) -> etree._Element:
    return parse_xml(build_entry_xml(request, '12345', 'secret-key', 1234567))


def _attendance_tags(root: etree._Element) -> list[str]:
    attendance = root.find('Attendance')
    assert attendance is not None
    return [child.tag for child in attendance]


class TestBuildEntryXml:
    """Tests for build_entry_xml."""

    def test_settings_block(self, valid_request: AttendanceRequest) -> None:
        """Test that the Settings element carries credentials and fixed values."""
        root = _build(valid_request)

        assert root.tag == 'Entry'
        assert root.findtext('Settings/userID') == '12345'
        assert root.findtext('Settings/userRole') == 'EDU'
        assert root.findtext('Settings/userKey') == 'secret-key'
        assert root.findtext('Settings/orgID') == '1234567'
        assert root.findtext('Settings/settingOutput') == '1'
        assert root.findtext('Settings/emailOutput') in {None, ''}
        assert root.findtext('Settings/languageID') == '1'
        assert root.findtext('Settings/defaultLanguageID') == '1'

    def test_date_only_end_date_is_widened(self, valid_request: AttendanceRequest) -> None:
        """Test that YYYY-MM-DD gets the default 09:00 UTC time."""
        root = _build(valid_request)

        assert root.findtext('Attendance/endDate') == '2024-09-27T09:00:00+00:00'

    @pytest.mark.parametrize(
        'end_date',
        ['2024-09-27T14:15:00+02:00', '2024-09-27T00:00:00Z', '27.09.2024'],
    )
    def test_other_end_dates_pass_through(self, end_date: str) -> None:
        """Test that values with a time component (or unknown formats) are untouched."""
        root = _build(AttendanceRequest(end_date=end_date, pe_course_id=1))

        assert root.findtext('Attendance/endDate') == end_date

    def test_internal_course_id_wins(self) -> None:
        """Test that only PECourseID is emitted when both course ids are set."""
        root = _build(
            AttendanceRequest(end_date='2024-09-27', pe_course_id=1, external_course_id='EXT')
        )

        assert root.findtext('Attendance/PECourseID') == '1'
        assert root.find('Attendance/externalCourseID') is None

    def test_external_person_id_wins(self) -> None:
        """Test that only externalPersonID is emitted when both person ids are set."""
        root = _build(
            AttendanceRequest(end_date='2024-09-27', pe_person_id=7, external_person_id='P-7')
        )

        assert root.findtext('Attendance/externalPersonID') == 'P-7'
        assert root.find('Attendance/PEPersonID') is None

    def test_external_fallbacks(self) -> None:
        """Test the element names used for the non-preferred alternatives."""
        root = _build(
            AttendanceRequest(
                end_date='2024-09-27',
                external_course_id='C-1',
                pe_person_id=7,
                external_module_id='M-1',
            )
        )

        assert root.findtext('Attendance/externalCourseID') == 'C-1'
        assert root.findtext('Attendance/PEPersonID') == '7'
        assert root.findtext('Attendance/externalmoduleID') == 'M-1'

    def test_element_order(self) -> None:
        """Test course, edition, person, module, endDate ordering."""
        root = _build(
            AttendanceRequest(
                end_date='2024-09-27',
                pe_course_id=1,
                pe_edition_id=2,
                external_person_id='P',
                pe_module_id=3,
            )
        )

        assert _attendance_tags(root) == [
            'PECourseID',
            'PEEditionID',
            'externalPersonID',
            'PEModuleID',
            'endDate',
        ]

    def test_minimal_attendance_without_identifiers(self) -> None:
        """Test that the builder tolerates a request with no identifiers."""
        root = _build(AttendanceRequest(end_date='2024-09-27'))

        assert _attendance_tags(root) == ['endDate']

    def test_values_are_escaped(self) -> None:
        """Test that markup characters in values are escaped, not injected."""
        request = AttendanceRequest(
            end_date='2024-09-27',
            external_course_id='A&B <course>',
            external_person_id='"P" \'1\'',
        )
        xml: str = build_entry_xml(request, 'u<1>', 'k&y', 1)
        root = parse_xml(xml)

        assert root.findtext('Attendance/externalCourseID') == 'A&B <course>'
        assert root.findtext('Attendance/externalPersonID') == '"P" \'1\''
        assert root.findtext('Settings/userID') == 'u<1>'
        assert root.findtext('Settings/userKey') == 'k&y'
        assert root.find('Attendance/course') is None

    def test_xml_declaration_present(self, valid_request: AttendanceRequest) -> None:
        """Test that the payload starts with an XML declaration."""
        xml: str = build_entry_xml(valid_request, '1', 'k', 1)

        assert xml.startswith('<?xml version="1.0" encoding="utf-8"?>')

    def test_entry_is_compact(self, valid_request: AttendanceRequest) -> None:
        """Test that no whitespace is rendered between elements of the Entry."""
        xml: str = build_entry_xml(valid_request, '1', 'k', 1)

        declaration, entry = xml.split('\n', 1)

        assert declaration == '<?xml version="1.0" encoding="utf-8"?>'
        assert entry.startswith('<Entry><Settings><userID>1</userID>')
        assert entry.endswith('</Attendance></Entry>')
        assert '\n' not in entry
        assert re.search(r'>\s+<', entry) is None

    def test_newlines_in_values_are_kept(self) -> None:
        """Test that compacting the markup leaves field values untouched."""
        request = AttendanceRequest(
            end_date='2024-09-27', pe_course_id=1, external_person_id='P\n1'
        )

        root: etree._Element = parse_xml(build_entry_xml(request, '1', 'k', 1))

        assert root.findtext('Attendance/externalPersonID') == 'P\n1'

    def test_request_to_xml_delegates(self, valid_request: AttendanceRequest) -> None:
        """Test that AttendanceRequest.to_xml produces the same document."""
        assert valid_request.to_xml('1', 'k', 1) == build_entry_xml(valid_request, '1', 'k', 1)


class TestAttendanceFields:
    """Tests for attendance_fields."""

    def test_fields_for_full_request(self) -> None:
        """Test the selected (tag, value) pairs."""
        request = AttendanceRequest(
            end_date='2024-09-27T10:00:00+00:00',
            pe_course_id=1,
            external_course_id='ignored',
            pe_person_id=9,
        )

        assert attendance_fields(request) == [
            ('PECourseID', '1'),
            ('PEPersonID', '9'),
            ('endDate', '2024-09-27T10:00:00+00:00'),
        ]


class TestBuildDataRequestForm:
    """Tests for build_data_request_form."""

    def test_form_fields(self) -> None:
        """Test field names and value formatting."""
        form = build_data_request_form(
            user_type='E',
            user_id='12345',
            user_key='key123',
            xml_id=100,
            nested=True,
            include_schema=False,
            parameters={'param_tblcourseid': '653570'},
        )

        assert form == {
            'usertype': 'E',
            'ID': '12345',
            'Key': 'key123',
            'XmlID': '100',
            'Nested': 'true',
            'Schema': 'false',
            'Parameters': 'param_tblcourseid=653570',
        }

    def test_parameters_are_query_encoded(self) -> None:
        """Test that the parameter map becomes a single query string value."""
        form = build_data_request_form(
            'E', '1', 'k', 0, False, True, {'name': 'a b&c', 'id': 7}
        )

        assert form['Nested'] == 'false'
        assert form['Schema'] == 'true'
        assert parse_qs(form['Parameters']) == {'name': ['a b&c'], 'id': ['7']}

    def test_no_parameters(self) -> None:
        """Test that missing parameters yield an empty string."""
        form = build_data_request_form('E', '1', 'k', 0, True, False)

        assert form['Parameters'] == ''
