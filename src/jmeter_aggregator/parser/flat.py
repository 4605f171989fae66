"""
Parser for JMeter's default result layout with attribute-encoded samples.

Each sample is one element, typically <httpSample> or <sample>, whose attributes
carry the fields:

- lb: sampler label, used as the sample URI
- ts: start timestamp in epoch milliseconds
- t: elapsed time in milliseconds
- by: response size in bytes
- na: active threads across all thread groups
- s: success flag
- rc: response code, which may be non-numeric for transport failures
- tn: thread name, "<thread group> <group number>-<thread number>"
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping

from jmeter_aggregator.aggregation import CONNECTION_ERROR_STATUS
from jmeter_aggregator.logger import logger
from jmeter_aggregator.parser.base import ResultParser
from jmeter_aggregator.parser.events import XmlEvent
from jmeter_aggregator.parser.fields import parse_bool, parse_int
from jmeter_aggregator.schemas import SampleRecord

__all__ = ["FlatAttributeResultParser", "parse_response_code", "thread_group_label"]

_THREAD_NUMBER_SUFFIX = re.compile(r"\s+\d+-\d+$")


def thread_group_label(thread_name: str) -> str:
    """
    :param thread_name: JMeter thread name such as "Checkout 1-3"
    :return: The thread group part of the name, e.g. "Checkout"
    """
    return _THREAD_NUMBER_SUFFIX.sub("", thread_name)


def parse_response_code(value: str | None) -> int:
    """
    Read a response code attribute, tolerating non-numeric values.

    :param value: Attribute text, e.g. "200" or "Non HTTP response code: ..."
    :return: The numeric code, or CONNECTION_ERROR_STATUS if value is not numeric
    """
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning(f"Error parsing response code '{value}'")
        return CONNECTION_ERROR_STATUS


class FlatAttributeResultParser(ResultParser):
    """
    Builds one sample from the attributes of each terminator element.

    Samples are emitted when a terminator element starts, so child samples
    nested inside a parent sample are each counted. Missing numeric attributes
    default to 0; non-numeric ones abort the parse, except the response code.
    """

    def records_from_events(
        self, events: Iterable[XmlEvent]
    ) -> Iterator[SampleRecord]:
        for event in events:
            if event.kind == "start" and self.is_terminator(
                event.name, event.local_name
            ):
                yield self.record_from_attributes(event.attributes)

    @staticmethod
    def record_from_attributes(attributes: Mapping[str, str]) -> SampleRecord:
        """
        :param attributes: Attributes of one sample element
        :return: The sample described by the attributes
        :raises RecordFieldError: If a numeric attribute other than rc is invalid
        """

        def numeric(name: str, field: str) -> int:
            value = attributes.get(name)
            return 0 if value is None else parse_int(field, value)

        return SampleRecord(
            uri=attributes.get("lb", ""),
            timestamp=numeric("ts", "timestamp"),
            duration=numeric("t", "duration"),
            byte_count=numeric("by", "byte_count"),
            active_threads=numeric("na", "active_threads"),
            success=parse_bool(attributes.get("s", "")),
            status_code=parse_response_code(attributes.get("rc")),
            group_label=thread_group_label(attributes.get("tn", "")),
        )
