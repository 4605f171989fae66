"""
Common contract for streaming result parsers.

A ResultParser turns a result stream into SampleRecords and feeds them through
a fresh AggregationSession, producing the ordered mapping of aggregation key to
AggregatedResponses. Concrete parsers differ only in how records are rebuilt
from the XML event stream.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import IO

from jmeter_aggregator.aggregation import (
    AggregatedResponses,
    AggregationSession,
    GroupKeyResolver,
)
from jmeter_aggregator.errors import MalformedInputError
from jmeter_aggregator.logger import logger
from jmeter_aggregator.parser.events import XmlEvent, iter_xml_events
from jmeter_aggregator.schemas import AggregationConfig, SampleRecord

__all__ = ["ResultParser"]


class ResultParser(ABC):
    """
    Abstract streaming parser aggregating a result document.

    Parsers hold configuration only; all per-run state lives in the
    AggregationSession created by `aggregate`, so one parser may aggregate
    several streams one after another.

    :param config: Aggregation config; defaults are used if None
    :param rng: Random source for reservoir sampling; a new one seeded from
        config.random_seed is used per run if None
    """

    def __init__(
        self,
        config: AggregationConfig | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config if config is not None else AggregationConfig()
        self.rng = rng
        self.resolver = GroupKeyResolver(
            self.config.request_groups, self.config.unmatched_group
        )

    def aggregate(
        self, stream: IO[str] | IO[bytes]
    ) -> dict[str, AggregatedResponses]:
        """
        Parse a result stream and aggregate every sample it contains.

        :param stream: Readable stream positioned at the start of the document
        :return: Mapping of aggregation key to finished AggregatedResponses, in
            the order keys were first seen
        :raises MalformedInputError: If the document is not well-formed or a
            numeric field is not numeric
        :raises ParserInitializationError: If the XML engine cannot be created
        """
        session = AggregationSession(self.config, resolver=self.resolver, rng=self.rng)

        try:
            for record in self.iter_records(stream):
                session.add(record)
        except MalformedInputError as err:
            logger.error(
                f"Aborting after {session.parsed_count} entries, malformed input: {err}"
            )
            raise

        return session.finish()

    def iter_records(self, stream: IO[str] | IO[bytes]) -> Iterator[SampleRecord]:
        """
        Rebuild the samples of a result stream.

        :param stream: Readable stream positioned at the start of the document
        :return: Iterator of completed SampleRecords in document order
        """
        events = iter_xml_events(stream, chunk_size=self.config.read_chunk_size)

        return self.records_from_events(events)

    def is_terminator(self, name: str, local: str) -> bool:
        """
        :param name: Qualified element name
        :param local: Element name without namespace prefix
        :return: True if the element delimits one sample
        """
        return local in self.config.node_names or name in self.config.node_names

    @abstractmethod
    def records_from_events(
        self, events: Iterable[XmlEvent]
    ) -> Iterator[SampleRecord]:
        """
        Rebuild samples from an XML event iterator.

        :param events: Iterator of XmlEvent in document order
        :return: Iterator of completed SampleRecords
        """
        ...
