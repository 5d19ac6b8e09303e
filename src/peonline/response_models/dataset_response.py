# peonline/response_models/dataset_response.py
"""
Pydantic model for RetrieveDataBySoapMessage datasets.

The data service returns a .NET style DataSet: a root element holding an
optional embedded xs:schema followed by one element per row, where rows of the
same table share an element name:

    <NewDataSet>
      <xs:schema id="NewDataSet" xmlns:xs="http://www.w3.org/2001/XMLSchema">...</xs:schema>
      <Table><tblcourseid>653570</tblcourseid><title>First aid</title></Table>
      <Table><tblcourseid>653571</tblcourseid><title>Hygiene</title></Table>
    </NewDataSet>

The row layout depends on the query (XmlID), so rows are kept as Nodes
rather than fixed models.
"""

import logging
from typing import Any, ClassVar

import pandas as pd
from lxml import etree
from pydantic import Field

from ..utils.model_tools import (
    Node,
    attribute_name,
    element_to_node,
    iter_child_elements,
    local_name,
)
from ..utils.xml_parser import find_schema_element, is_schema_element, serialize_xml
from .base import NormalizedResponseBase, ResponseKind

logger: logging.Logger = logging.getLogger(__name__)


def parse_schema(schema_element: etree._Element) -> dict[str, dict[str, str]]:
    """
    Collect the element declarations of an embedded schema.

    Every named xs:element in the schema, at any depth, is listed once (the
    first declaration of a name wins). References (ref=...) carry no name
    and are skipped.

    Args:
        schema_element: The xs:schema element.

    Returns:
        Mapping of declared element name to its attributes, with namespaced
        attributes spelled 'prefix:name' (e.g. 'msdata:IsDataSet').
    """
    namespace: str | None = etree.QName(schema_element).namespace
    element_tag: str = f'{{{namespace}}}element' if namespace else 'element'

    declarations: dict[str, dict[str, str]] = {}
    for declaration in schema_element.iter(element_tag):
        name: str | None = declaration.get('name')
        if not name or name in declarations:
            continue
        declarations[name] = {
            attribute_name(declaration, key): value
            for key, value in declaration.attrib.items()
        }

    logger.debug('Parsed %d schema element declarations', len(declarations))
    return declarations


class DatasetResponse(NormalizedResponseBase):
    """
    Normalized dataset.

    Attributes:
        xml_schema: Declared elements of the embedded schema, or None when
                    the service sent no schema (serialized as 'schema').
        data: Rows grouped by element name. Every group is a list, even when
              the dataset holds a single row.
        raw_xml: The dataset document, serialized.
    """

    kind: ClassVar[ResponseKind] = ResponseKind.DATASET

    xml_schema: dict[str, dict[str, str]] | None = Field(None, alias='schema')
    data: dict[str, list[Any]] = Field(default_factory=dict)
    raw_xml: str = Field('', alias='rawXml')

    @classmethod
    def from_xml_element(cls, root: etree._Element) -> 'DatasetResponse':
        """
        Extract a dataset from the root element of a dataset document.

        Args:
            root: The dataset document's root element.

        Returns:
            The normalized dataset.
        """
        schema_element: etree._Element | None = find_schema_element(root)
        xml_schema: dict[str, dict[str, str]] | None = (
            parse_schema(schema_element) if schema_element is not None else None
        )

        data: dict[str, list[Node]] = {}
        for child in iter_child_elements(root):
            if is_schema_element(child):
                continue
            data.setdefault(local_name(child), []).append(element_to_node(child))

        logger.info(
            'Parsed dataset <%s>: %s',
            local_name(root),
            {name: len(rows) for name, rows in data.items()},
        )

        return cls(xml_schema=xml_schema, data=data, raw_xml=serialize_xml(root))

    def rows(self, name: str) -> list[Node]:
        """
        Return the rows of one group.

        Args:
            name: The row element name (e.g. 'Table').

        Returns:
            The rows, or an empty list if the dataset has no such group.
        """
        return self.data.get(name, [])

    def to_dataframe(self, name: str) -> pd.DataFrame:
        """
        Convert one group of rows to a pandas DataFrame for analysis.

        Nested groups are flattened into dotted column names (e.g.
        'module.title'). Rows that are plain text end up in a 'value' column.

        Args:
            name: The row element name.

        Returns:
            DataFrame with one row per element. Empty if the group is missing.

        Example:
            >>> response = client.get_data({'param_tblcourseid': '653570'})
            >>> df = response.to_dataframe('Table')
            >>> print(df[['tblcourseid', 'title']])
        """
        records: list[dict[str, Any]] = [
            row if isinstance(row, dict) else {'value': row} for row in self.rows(name)
        ]
        if not records:
            return pd.DataFrame()
        return pd.json_normalize(records)

    def __repr__(self) -> str:
        group_sizes: dict[str, int] = {name: len(rows) for name, rows in self.data.items()}
        return f'DatasetResponse(groups={group_sizes}, schema={self.xml_schema is not None})'
