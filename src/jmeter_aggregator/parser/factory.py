"""
Selection of the result parser matching a document layout.
"""

from __future__ import annotations

import random

from jmeter_aggregator.parser.base import ResultParser
from jmeter_aggregator.parser.flat import FlatAttributeResultParser
from jmeter_aggregator.parser.nested import NestedElementResultParser
from jmeter_aggregator.schemas import AggregationConfig, ParserType

__all__ = ["PARSERS", "create_parser"]

PARSERS: dict[ParserType, type[ResultParser]] = {
    ParserType.DEFAULT: FlatAttributeResultParser,
    ParserType.WEB_DRIVER: NestedElementResultParser,
}


def create_parser(
    config: AggregationConfig | None = None,
    parser_type: ParserType | str | None = None,
    rng: random.Random | None = None,
) -> ResultParser:
    """
    Create the parser for a result layout.

    :param config: Aggregation config; defaults are used if None
    :param parser_type: Layout to parse; overrides config.parser_type if given
    :param rng: Random source for reservoir sampling
    :return: Parser implementing the layout
    :raises ValueError: If the parser type is unknown
    """
    config = config if config is not None else AggregationConfig()
    resolved_type = ParserType(parser_type or config.parser_type)

    return PARSERS[resolved_type](config=config, rng=rng)
