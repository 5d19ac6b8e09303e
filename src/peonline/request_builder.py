# peonline/request_builder.py
"""
Wire payload builders for the PE-online ASMX operations.

- build_entry_xml() renders the <Entry> document for ProcessXML from a
  Jinja2 template. Autoescaping is on, so every value is XML-escaped by the
  template engine.
- build_data_request_form() assembles the form fields for
  RetrieveDataBySoapMessage.

Neither builder validates its input. Validation is a separate step
(see peonline.validation) that the clients run before building.
"""

import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from urllib.parse import urlencode

from jinja2 import Environment, FileSystemLoader, Template

from peonline.models import AttendanceRequest, EntityRef, ExternalId, InternalId
from peonline.utils import normalize_end_date

logger: logging.Logger = logging.getLogger(__name__)

ENTRY_TEMPLATE_NAME: str = 'entry.xml'

# The ProcessXML service only accepts submissions from EDU accounts
USER_ROLE: str = 'EDU'

# Element names per identifier kind, as spelled by the service
COURSE_TAGS: dict[str, str] = {'internal': 'PECourseID', 'external': 'externalCourseID'}
PERSON_TAGS: dict[str, str] = {'internal': 'PEPersonID', 'external': 'externalPersonID'}
MODULE_TAGS: dict[str, str] = {'internal': 'PEModuleID', 'external': 'externalmoduleID'}


@lru_cache(maxsize=1)
def get_template_environment() -> Environment:
    """
    Create the Jinja2 environment for the payload templates.

    Returns:
        A cached Environment loading from the package's templates directory.

    Raises:
        FileNotFoundError: If the templates directory is missing.
    """
    templates_dir: Path = Path(__file__).parent / 'templates'

    if not templates_dir.exists():
        error_message: str = f'Templates directory not found at: {templates_dir}'
        logger.error(error_message)
        raise FileNotFoundError(error_message)

    environment: Environment = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=True,  # Automatically escape variables for XML safety
        trim_blocks=True,
        lstrip_blocks=True,
    )
    logger.debug('Jinja2 environment initialized with templates from: %r', templates_dir)
    return environment


def _ref_field(ref: EntityRef | None, tags: dict[str, str]) -> tuple[str, str] | None:
    match ref:
        case InternalId(value=value):
            return tags['internal'], str(value)
        case ExternalId(value=value):
            return tags['external'], value
        case None:
            return None


def attendance_fields(request: AttendanceRequest) -> list[tuple[str, str]]:
    """
    Select the <Attendance> child elements for a request, in wire order.

    Order: course, edition (if any), person, module, endDate. For each
    identifier pair only the reference chosen by the request's precedence is
    emitted. A date-only endDate is widened to 09:00 UTC.

    Args:
        request: The attendance request.

    Returns:
        List of (element name, text) pairs.

    Example:
        >>> attendance_fields(AttendanceRequest(end_date='2024-09-27', pe_course_id=1))
        [('PECourseID', '1'), ('endDate', '2024-09-27T09:00:00+00:00')]
    """
    fields: list[tuple[str, str] | None] = [
        _ref_field(request.course_ref, COURSE_TAGS),
        ('PEEditionID', str(request.pe_edition_id)) if request.pe_edition_id is not None else None,
        _ref_field(request.person_ref, PERSON_TAGS),
        _ref_field(request.module_ref, MODULE_TAGS),
        ('endDate', normalize_end_date(request.end_date)),
    ]
    return [field for field in fields if field is not None]


def build_entry_xml(
    request: AttendanceRequest,
    user_id: str,
    user_key: str,
    org_id: int,
) -> str:
    """
    Build the <Entry> XML document for a single attendance submission.

    Args:
        request: The attendance to submit.
        user_id: userID of the EDU account.
        user_key: userKey of the EDU account.
        org_id: orgID of the organisation.

    Returns:
        The rendered XML document, declaration included.

    Raises:
        jinja2.TemplateNotFound: If the template file doesn't exist.
    """
    template: Template = get_template_environment().get_template(ENTRY_TEMPLATE_NAME)

    fields: list[tuple[str, str]] = attendance_fields(request)
    logger.debug('Rendering <Entry> with attendance fields: %s', [tag for tag, _ in fields])

    return template.render(
        user_id=user_id,
        user_role=USER_ROLE,
        user_key=user_key,
        org_id=org_id,
        attendance_fields=fields,
    )


def build_data_request_form(
    user_type: str,
    user_id: str,
    user_key: str,
    xml_id: int,
    nested: bool,
    include_schema: bool,
    parameters: Mapping[str, str | int] | None = None,
) -> dict[str, str]:
    """
    Build the form fields for a RetrieveDataBySoapMessage request.

    The query parameters are serialized into a query string which then
    travels as the value of the single Parameters field. requests encodes the
    form once more when posting, so the parameters end up double encoded, as
    the service expects.

    Args:
        user_type: usertype of the account (e.g. 'E').
        user_id: ID of the account.
        user_key: Key of the account.
        xml_id: Identifier of the predefined query.
        nested: Whether to request nested data.
        include_schema: Whether to request an embedded schema.
        parameters: Query parameters, e.g. {'param_tblcourseid': '653570'}.

    Returns:
        Dictionary of form field names to string values.

    Example:
        >>> build_data_request_form('E', '1', 'k', 0, True, False, {'a': 'b c'})['Parameters']
        'a=b+c'
    """
    return {
        'usertype': user_type,
        'ID': user_id,
        'Key': user_key,
        'XmlID': str(xml_id),
        'Nested': 'true' if nested else 'false',
        'Schema': 'true' if include_schema else 'false',
        'Parameters': urlencode(dict(parameters or {}), doseq=True),
    }
