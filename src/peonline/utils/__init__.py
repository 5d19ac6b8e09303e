# peonline/utils/__init__.py

from .config_loader import (
    AttendanceSection,
    ClientSection,
    DataRequestSection,
    PeOnlineConfig,
    load_config,
)
from .datetime_utils import (
    format_for_attendance,
    is_date_only,
    normalize_end_date,
    parse_end_date,
)
from .logger import setup_logger
from .model_tools import Node, add_promoted, element_to_node, local_name
from .transport import post_form
from .xml_parser import (
    extract_inner_payload,
    is_schema_element,
    is_soap_envelope,
    is_summary_document,
    parse_xml,
    serialize_xml,
    try_parse_xml,
)

__all__: list[str] = [
    # config_loader.py
    'AttendanceSection',
    'ClientSection',
    'DataRequestSection',
    # model_tools.py
    'Node',
    'PeOnlineConfig',
    'add_promoted',
    'element_to_node',
    # xml_parser.py
    'extract_inner_payload',
    # datetime_utils.py
    'format_for_attendance',
    'is_date_only',
    'is_schema_element',
    'is_soap_envelope',
    'is_summary_document',
    'load_config',
    'local_name',
    'normalize_end_date',
    'parse_end_date',
    'parse_xml',
    # transport.py
    'post_form',
    'serialize_xml',
    # logger.py
    'setup_logger',
    'try_parse_xml',
]
