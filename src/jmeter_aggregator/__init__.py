"""
jmeter_aggregator streams JMeter XML result files into bounded-memory,
per-group performance statistics for downstream reporting.
"""

from .aggregation import (
    CONNECTION_ERROR_STATUS,
    AggregatedResponses,
    GroupKeyResolver,
    SampleAccumulator,
    StatusCodeHistogram,
)
from .errors import (
    AggregationStateError,
    AggregatorError,
    MalformedInputError,
    ParserInitializationError,
    RecordFieldError,
)
from .logger import configure_logger, logger
from .parser import (
    FlatAttributeResultParser,
    NestedElementResultParser,
    ResultParser,
    create_parser,
)
from .schemas import AggregationConfig, ParserType, RequestGroup
from .settings import LoggingSettings, Settings, print_config

__all__ = [
    "CONNECTION_ERROR_STATUS",
    "AggregatedResponses",
    "AggregationConfig",
    "AggregationStateError",
    "AggregatorError",
    "FlatAttributeResultParser",
    "GroupKeyResolver",
    "LoggingSettings",
    "MalformedInputError",
    "NestedElementResultParser",
    "ParserInitializationError",
    "ParserType",
    "RecordFieldError",
    "RequestGroup",
    "ResultParser",
    "SampleAccumulator",
    "Settings",
    "StatusCodeHistogram",
    "configure_logger",
    "create_parser",
    "logger",
    "print_config",
]
