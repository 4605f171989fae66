"""
Pull-style XML event stream over a readable character or byte stream.

Wraps the incremental SAX engine behind a narrow iterator of start, text, and
end events so the record-building parsers never see engine callbacks. Input is
fed to the engine one chunk at a time and only the events produced by that
chunk are buffered, so memory use is independent of document size.
"""

from __future__ import annotations

import contextlib
import xml.sax
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import IO, Literal, NamedTuple
from xml.sax.handler import ContentHandler, feature_external_ges
from xml.sax.xmlreader import IncrementalParser

from jmeter_aggregator.errors import MalformedInputError, ParserInitializationError

__all__ = ["XmlEvent", "iter_xml_events", "local_name"]


class XmlEvent(NamedTuple):
    """
    One element boundary or text run from the XML stream.

    :param kind: "start" on entering an element, "text" for character data,
        "end" on leaving an element
    :param name: Qualified element name for start/end, empty for text
    :param attributes: Element attributes for start events, empty otherwise
    :param text: Character data for text events, empty otherwise
    """

    kind: Literal["start", "text", "end"]
    name: str = ""
    attributes: Mapping[str, str] = MappingProxyType({})
    text: str = ""

    @property
    def local_name(self) -> str:
        return local_name(self.name)


def local_name(qualified_name: str) -> str:
    """
    :param qualified_name: Element name, optionally prefixed as prefix:name
    :return: The element name without its namespace prefix
    """
    return qualified_name.rpartition(":")[2]


class _EventCollector(ContentHandler):
    def __init__(self):
        super().__init__()
        self.events: list[XmlEvent] = []

    def startElement(self, name, attrs):  # noqa: N802
        self.events.append(XmlEvent("start", name, dict(attrs.items())))

    def endElement(self, name):  # noqa: N802
        self.events.append(XmlEvent("end", name))

    def characters(self, content):
        self.events.append(XmlEvent("text", text=content))

    def drain(self) -> list[XmlEvent]:
        events, self.events = self.events, []
        return events


def _create_reader(collector: ContentHandler) -> IncrementalParser:
    try:
        reader = xml.sax.make_parser()
        reader.setFeature(feature_external_ges, False)
    except (xml.sax.SAXException, ImportError) as err:
        raise ParserInitializationError(
            f"XML parser could not be created: {err}"
        ) from err

    if not isinstance(reader, IncrementalParser):
        raise ParserInitializationError(
            f"XML parser {type(reader).__name__} does not support incremental input"
        )

    reader.setContentHandler(collector)

    return reader


def iter_xml_events(
    stream: IO[str] | IO[bytes], chunk_size: int = 65536
) -> Iterator[XmlEvent]:
    """
    Iterate over the XML events of a stream, reading it chunk by chunk.

    :param stream: Readable stream returning str or bytes from read(size)
    :param chunk_size: Number of characters or bytes requested per read
    :return: Iterator of XmlEvent in document order
    :raises MalformedInputError: If the document is not well-formed
    :raises ParserInitializationError: If the XML engine cannot be constructed
    """
    collector = _EventCollector()
    reader = _create_reader(collector)
    fed = False
    closed = False

    try:
        while chunk := stream.read(chunk_size):
            fed = True
            reader.feed(chunk)
            yield from collector.drain()

        if not fed:
            raise MalformedInputError("Malformed result document: no content")

        closed = True
        reader.close()
        yield from collector.drain()
    except xml.sax.SAXParseException as err:
        raise MalformedInputError(
            f"Malformed result document: {err.getMessage()}",
            line=err.getLineNumber(),
            column=err.getColumnNumber(),
        ) from err
    finally:
        if not closed:
            # The document already failed or was abandoned; only release the reader
            with contextlib.suppress(xml.sax.SAXException):
                reader.close()
