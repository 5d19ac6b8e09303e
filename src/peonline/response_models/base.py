# peonline/response_models/base.py

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict


class ResponseKind(StrEnum):
    """The shape a normalized response took."""

    SUMMARY = 'summary'
    DATASET = 'dataset'
    RAW = 'raw'
    RESULT = 'result'


class NormalizedResponseBase(BaseModel):
    """
    Common base of every normalized response.

    Subclasses set the kind class attribute. to_dict() gives the plain
    mapping form, keyed the way the webservice documentation spells things
    (rawXml, schema, ...).
    """

    kind: ClassVar[ResponseKind]

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Return the response as a plain nested mapping."""
        return self.model_dump(by_alias=True)
