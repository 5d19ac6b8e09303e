# peonline/models.py
"""
Pydantic models for PE-online request payloads.

AttendanceRequest describes one attendance submission for the ProcessXML
operation. DataRequestOptions carries the per-call overrides for the
RetrieveDataBySoapMessage operation.

Courses, persons and modules can each be identified either by their internal
PE-online id or by the caller's external id. Both may be supplied; the
request resolves each pair into exactly one tagged reference (InternalId or
ExternalId) using a fixed precedence, so the builder never has to guess.
"""

from datetime import date
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from peonline.utils import format_for_attendance


class InternalId(BaseModel):
    """Reference by internal (numeric) PE-online id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal['internal'] = 'internal'
    value: int


class ExternalId(BaseModel):
    """Reference by the caller's external (string) id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal['external'] = 'external'
    value: str


EntityRef = InternalId | ExternalId


def _prefer(first: EntityRef | None, second: EntityRef | None) -> EntityRef | None:
    return first if first is not None else second


# 0 and blank strings are not usable ids; they count as unset
def _internal(value: int | None) -> InternalId | None:
    return InternalId(value=value) if value else None


def _external(value: str | None) -> ExternalId | None:
    return ExternalId(value=value) if value and value.strip() else None


class AttendanceRequest(BaseModel):
    """
    Request model for the ProcessXML attendance submission.

    Immutable once constructed. Fields accept both their Python names and the
    PE-online wire names (e.g. pe_course_id or PECourseID).

    Attributes:
        org_id: Organisation id. Optional on the model, required by the validator.
        end_date: Attendance end date. A date-only 'YYYY-MM-DD' value is
                  widened to 09:00 UTC when the XML is built.
        pe_course_id / external_course_id: Course identifier alternatives.
        pe_edition_id: Optional course edition id.
        pe_person_id / external_person_id: Person identifier alternatives.
        pe_module_id / external_module_id: Module identifier alternatives.

    Example:
        >>> request = AttendanceRequest(
        ...     org_id=1234567,
        ...     end_date='2024-09-27',
        ...     pe_course_id=123456,
        ...     external_person_id='BIG-123456',
        ... )
        >>> request.course_ref
        InternalId(kind='internal', value=123456)
    """

    operation_name: ClassVar[str] = 'ProcessXML'

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    org_id: int | None = Field(None, alias='orgID')
    end_date: str = Field(
        ...,
        alias='endDate',
        description='ISO 8601 date or datetime',
    )
    pe_course_id: int | None = Field(None, alias='PECourseID')
    external_course_id: str | None = Field(None, alias='externalCourseId')
    pe_edition_id: int | None = Field(None, alias='PEEditionID')
    pe_person_id: int | None = Field(None, alias='pePersonId')
    external_person_id: str | None = Field(None, alias='externalPersonId')
    pe_module_id: int | None = Field(None, alias='peModuleId')
    external_module_id: str | None = Field(None, alias='externalModuleId')

    @field_validator('end_date', mode='before')
    @classmethod
    def coerce_end_date(cls, value: Any) -> Any:
        """Format date and datetime objects as endDate strings."""
        if isinstance(value, date):
            return format_for_attendance(value)
        return value

    @property
    def course_ref(self) -> EntityRef | None:
        """Course reference. The internal id wins over the external id."""
        return _prefer(_internal(self.pe_course_id), _external(self.external_course_id))

    @property
    def person_ref(self) -> EntityRef | None:
        """Person reference. The external id wins over the internal id."""
        return _prefer(_external(self.external_person_id), _internal(self.pe_person_id))

    @property
    def module_ref(self) -> EntityRef | None:
        """Module reference. The internal id wins over the external id."""
        return _prefer(_internal(self.pe_module_id), _external(self.external_module_id))

    def to_dict(self) -> dict[str, str | int]:
        """
        Convert the request to a plain mapping keyed by wire names.

        endDate is always present. Every other key is included only when
        the caller set it, including both halves of an alternative pair.

        Returns:
            Dictionary such as {'endDate': '2024-09-27', 'PECourseID': 123456}.
        """
        data: dict[str, str | int] = {'endDate': self.end_date}
        optional_fields: dict[str, str | int | None] = {
            'PECourseID': self.pe_course_id,
            'externalCourseId': self.external_course_id,
            'PEEditionID': self.pe_edition_id,
            'pePersonId': self.pe_person_id,
            'externalPersonId': self.external_person_id,
            'peModuleId': self.pe_module_id,
            'externalModuleId': self.external_module_id,
        }
        data.update({key: value for key, value in optional_fields.items() if value is not None})
        return data

    def to_xml(self, user_id: str, user_key: str, org_id: int) -> str:
        """
        Serialize the request into the <Entry> document sent as sXML.

        Args:
            user_id: userID of the EDU account.
            user_key: userKey of the EDU account.
            org_id: orgID written into the <Settings> element.

        Returns:
            The XML payload as a string.
        """
        from peonline.request_builder import build_entry_xml

        return build_entry_xml(self, user_id, user_key, org_id)


class DataRequestOptions(BaseModel):
    """
    Per-call overrides for a RetrieveDataBySoapMessage request.

    Every field left as None falls back to the client's configured default.
    Accepts the option names used by the service documentation as aliases
    (xmlId, nested, schema).

    Attributes:
        xml_id: Identifier of the predefined query.
        nested: Whether the service should return nested data.
        include_schema: Whether the service should embed an xs:schema.
    """

    operation_name: ClassVar[str] = 'RetrieveDataBySoapMessage'

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra='forbid')

    xml_id: int | None = Field(None, alias='xmlId', ge=0)
    nested: bool | None = None
    include_schema: bool | None = Field(None, alias='schema')
