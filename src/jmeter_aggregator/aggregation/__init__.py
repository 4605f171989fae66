"""
Bounded-memory aggregation of parsed load-test samples.

Provides the running statistics accumulators, status code histogram, group key
resolution, per-key result bundles, and the session that ties them together for
one result stream.
"""

from __future__ import annotations

from .accumulator import SampleAccumulator
from .grouping import AntPathMatcher, GroupKeyResolver
from .responses import AggregatedResponses, is_failed_sample
from .session import AggregationSession
from .status_codes import (
    CONNECTION_ERROR_STATUS,
    HTTP_ERROR_STATUS,
    StatusCodeHistogram,
)

__all__ = [
    "CONNECTION_ERROR_STATUS",
    "HTTP_ERROR_STATUS",
    "AggregatedResponses",
    "AggregationSession",
    "AntPathMatcher",
    "GroupKeyResolver",
    "SampleAccumulator",
    "StatusCodeHistogram",
    "is_failed_sample",
]
