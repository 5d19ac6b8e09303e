"""Pytest configuration and shared fixtures for peonline tests."""

from pathlib import Path
from typing import Any
from unittest.mock import Mock
from xml.sax.saxutils import escape

import pytest
import yaml
from requests import Response

from peonline.models import AttendanceRequest
from peonline.utils import PeOnlineConfig


@pytest.fixture
def config_dict() -> dict[str, Any]:
    """Raw configuration as it would be read from config.yaml."""
    return {
        'attendance': {
            'endpoint_url': 'https://test.example.com/WriteAttendance.asmx/ProcessXML',
            'user_id': '12345',
            'user_key': 'secret-key',
            'org_id': 1234567,
        },
        'data_request': {
            'endpoint_url': 'https://test.example.com/DataRequest.asmx/RetrieveDataBySoapMessage',
            'user_type': 'E',
            'user_id': '12345',
            'user_key': 'key123',
            'xml_id': 42,
            'nested': True,
            'include_schema': False,
        },
        'client': {
            'request_timeout': [10, 30],
            'verify_ssl': True,
        },
        'logging': {
            'console_level': 'INFO',
        },
    }


@pytest.fixture
def sample_config(config_dict: dict[str, Any]) -> PeOnlineConfig:
    """Create a sample PeOnlineConfig for testing."""
    return PeOnlineConfig.model_validate(config_dict)


@pytest.fixture
def temp_config_file(tmp_path: Path, config_dict: dict[str, Any]) -> Path:
    """Create a temporary config file for testing."""
    config_path: Path = tmp_path / 'config.yaml'
    config_path.write_text(yaml.safe_dump(config_dict, sort_keys=False))
    return config_path


@pytest.fixture
def valid_request() -> AttendanceRequest:
    """An attendance request that passes validation."""
    return AttendanceRequest(
        org_id=1234567,
        end_date='2024-09-27',
        pe_course_id=123456,
        external_person_id='BIG-123456',
    )


@pytest.fixture
def summary_xml() -> str:
    """Submission summary with one error and one accepted entry."""
    return (
        '<Summary>'
        '<Results>'
        '<total_rows>10</total_rows>'
        '<accepted_rows>8</accepted_rows>'
        '<rejected_rows>2</rejected_rows>'
        '</Results>'
        '<Error><errorNR>E1</errorNR><errorMsg>bad row</errorMsg></Error>'
        '<Accepted>'
        '<person>P1</person><course>C1</course><meeting>M1</meeting><date>2024-01-01</date>'
        '</Accepted>'
        '</Summary>'
    )


def wrap_in_soap(inner_xml: str, prefix: str = 'soap') -> str:
    """Wrap a document the way the ASMX service does: escaped text in a Result element."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        f'<{prefix}:Envelope xmlns:{prefix}="http://schemas.xmlsoap.org/soap/envelope/">'
        f'<{prefix}:Body>'
        '<ProcessXMLResponse xmlns="http://www.pe-online.org/">'
        f'<ProcessXMLResult>{escape(inner_xml)}</ProcessXMLResult>'
        '</ProcessXMLResponse>'
        f'</{prefix}:Body>'
        f'</{prefix}:Envelope>'
    )


@pytest.fixture
def soap_summary_xml(summary_xml: str) -> str:
    """The summary document wrapped in a SOAP envelope."""
    return wrap_in_soap(summary_xml)


@pytest.fixture
def dataset_xml() -> str:
    """A .NET style dataset with an embedded schema and two rows."""
    return """<NewDataSet>
  <xs:schema id="NewDataSet" xmlns:xs="http://www.w3.org/2001/XMLSchema"
             xmlns:msdata="urn:schemas-microsoft-com:xml-msdata">
    <xs:element name="NewDataSet" msdata:IsDataSet="true">
      <xs:complexType>
        <xs:choice minOccurs="0" maxOccurs="unbounded">
          <xs:element name="Table">
            <xs:complexType>
              <xs:sequence>
                <xs:element name="tblcourseid" type="xs:int" minOccurs="0"/>
                <xs:element name="title" type="xs:string" minOccurs="0"/>
              </xs:sequence>
            </xs:complexType>
          </xs:element>
        </xs:choice>
      </xs:complexType>
    </xs:element>
  </xs:schema>
  <Table>
    <tblcourseid>653570</tblcourseid>
    <title>First aid</title>
  </Table>
  <Table>
    <tblcourseid>653571</tblcourseid>
    <title>Hygiene</title>
  </Table>
</NewDataSet>"""


def make_response(status_code: int = 200, body: str = '') -> Mock:
    """Create a mock requests.Response object."""
    response = Mock(spec=Response)
    response.status_code = status_code
    response.text = body
    response.content = body.encode('utf-8')
    response.headers = {'Content-Type': 'text/xml'}
    return response
