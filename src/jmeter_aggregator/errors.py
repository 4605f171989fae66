"""
Exceptions raised while parsing and aggregating result streams.

Failed samples (unsuccessful, sentinel sizes or durations, error status codes)
are data and are recorded as errors on the accumulators; the exceptions below
are reserved for conditions that abort an aggregation run.
"""

from __future__ import annotations

__all__ = [
    "AggregationStateError",
    "AggregatorError",
    "MalformedInputError",
    "ParserInitializationError",
    "RecordFieldError",
]


class AggregatorError(Exception):
    """
    Base class for all errors raised by jmeter_aggregator.
    """


class MalformedInputError(AggregatorError):
    """
    Raised when the result stream is not a well-formed document.

    :param message: Description of the failure
    :param line: Line number reported by the XML engine, if known
    :param column: Column number reported by the XML engine, if known
    """

    def __init__(
        self, message: str, line: int | None = None, column: int | None = None
    ):
        self.line = line
        self.column = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")


class RecordFieldError(MalformedInputError):
    """
    Raised when a numeric sample field carries non-numeric text.
    """

    def __init__(self, field: str, text: str):
        self.field = field
        self.text = text
        super().__init__(f"Invalid value {text!r} for sample field '{field}'")


class ParserInitializationError(AggregatorError):
    """
    Raised when the underlying XML engine cannot be constructed.
    """


class AggregationStateError(AggregatorError):
    """
    Raised when aggregated responses are finalized more than once.
    """
