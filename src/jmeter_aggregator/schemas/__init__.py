"""
Pydantic schema models for jmeter_aggregator.

Provides the configuration values, reconstructed sample records, and retained
sample distribution summaries shared across parsing and aggregation.
"""

from __future__ import annotations

from .base import StandardBaseModel
from .config import AggregationConfig, ParserType, RequestGroup
from .record import SampleRecord
from .statistics import PERCENTILE_PROBS, DistributionSummary, Percentiles

__all__ = [
    "PERCENTILE_PROBS",
    "AggregationConfig",
    "DistributionSummary",
    "ParserType",
    "Percentiles",
    "RequestGroup",
    "SampleRecord",
    "StandardBaseModel",
]
