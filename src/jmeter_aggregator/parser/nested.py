"""
Parser for result documents that encode each sample as nested leaf elements.

Produced by WebDriver-style samplers, where a sample element contains child
elements such as <location>, <timeStamp>, and <responseCode> whose text carries
the field values. Fields are rebuilt from character data, never attributes.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from jmeter_aggregator.parser.base import ResultParser
from jmeter_aggregator.parser.events import XmlEvent
from jmeter_aggregator.parser.fields import RecordBuilder, field_update
from jmeter_aggregator.schemas import SampleRecord

__all__ = ["NestedElementResultParser"]


class NestedElementResultParser(ResultParser):
    """
    Rebuilds samples from sibling leaf elements closed by a terminator element.

    The text buffer is cleared on every element start, so a closing element sees
    only the character data after the most recent start tag. A non-numeric value
    in a numeric field aborts the whole parse with RecordFieldError. Field values
    persist across samples, so a sample that omits a leaf element keeps the value
    from the sample before it.
    """

    def records_from_events(
        self, events: Iterable[XmlEvent]
    ) -> Iterator[SampleRecord]:
        builder = RecordBuilder()
        buffer: list[str] = []

        for event in events:
            if event.kind == "start":
                buffer.clear()
            elif event.kind == "text":
                buffer.append(event.text)
            else:
                local = event.local_name
                update = field_update(local, "".join(buffer))
                if update is not None:
                    builder.apply(update)

                if self.is_terminator(event.name, local):
                    yield builder.build()
