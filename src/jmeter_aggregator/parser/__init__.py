"""
Streaming parsers turning JMeter XML result documents into aggregated results.
"""

from __future__ import annotations

from .base import ResultParser
from .events import XmlEvent, iter_xml_events, local_name
from .factory import PARSERS, create_parser
from .fields import (
    ELEMENT_FIELDS,
    FieldUpdate,
    RecordBuilder,
    field_update,
    parse_bool,
    parse_int,
)
from .flat import FlatAttributeResultParser, parse_response_code, thread_group_label
from .nested import NestedElementResultParser

__all__ = [
    "ELEMENT_FIELDS",
    "PARSERS",
    "FieldUpdate",
    "FlatAttributeResultParser",
    "NestedElementResultParser",
    "RecordBuilder",
    "ResultParser",
    "XmlEvent",
    "create_parser",
    "field_update",
    "iter_xml_events",
    "local_name",
    "parse_bool",
    "parse_int",
    "parse_response_code",
    "thread_group_label",
]
