"""
Record reconstruction from nested leaf elements.

Nested result documents deliver one sample as a group of sibling leaf elements
(location, timeStamp, success, ...) closed by a terminator element. The pure
`field_update` function turns one leaf element into a field assignment and the
RecordBuilder accumulates those assignments until the terminator arrives, which
keeps the state machine testable without any XML input.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple

from jmeter_aggregator.errors import RecordFieldError
from jmeter_aggregator.schemas import SampleRecord

__all__ = [
    "ELEMENT_FIELDS",
    "FieldUpdate",
    "RecordBuilder",
    "field_update",
    "parse_bool",
    "parse_int",
]


def parse_int(field: str, text: str) -> int:
    """
    :param field: Name of the field being parsed, used in error messages
    :param text: Text to convert
    :return: The integer value of text
    :raises RecordFieldError: If text is not an integer
    """
    try:
        return int(text.strip())
    except ValueError as err:
        raise RecordFieldError(field, text) from err


def parse_bool(text: str) -> bool:
    """
    :param text: Text to convert
    :return: True only for "true", ignoring case and surrounding whitespace
    """
    return text.strip().lower() == "true"


class FieldUpdate(NamedTuple):
    """
    Assignment of a parsed value to one SampleRecord field.
    """

    field: str
    value: Any


ELEMENT_FIELDS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "location": ("uri", str),
    "timeStamp": ("timestamp", lambda text: parse_int("timestamp", text)),
    "success": ("success", parse_bool),
    "label": ("group_label", str),
    "elapsedTime": ("duration", lambda text: parse_int("duration", text)),
    "allThreads": ("active_threads", lambda text: parse_int("active_threads", text)),
    "responseCode": ("status_code", lambda text: parse_int("status_code", text)),
}
"Leaf element names mapped to the record field they set and its converter"


def field_update(name: str, text: str) -> FieldUpdate | None:
    """
    Convert the text of a closed leaf element into a field assignment.

    :param name: Local name of the element being closed
    :param text: Character data collected since the last element start
    :return: The field assignment, or None if the element carries no field
    :raises RecordFieldError: If a numeric field carries non-numeric text
    """
    mapping = ELEMENT_FIELDS.get(name)
    if mapping is None:
        return None

    field, convert = mapping

    return FieldUpdate(field, convert(text))


class RecordBuilder:
    """
    Mutable field values of the sample currently being read.

    Values are kept after a sample is built, so fields not repeated by the next
    sample carry over.
    """

    def __init__(self):
        self.values: dict[str, Any] = {}

    def apply(self, update: FieldUpdate):
        self.values[update.field] = update.value

    def build(self) -> SampleRecord:
        """
        :return: A SampleRecord from the fields seen so far, defaults elsewhere
        """
        return SampleRecord(**self.values)
