"""
Ephemeral per-sample record rebuilt from the result stream.
"""

from __future__ import annotations

from pydantic import Field

from jmeter_aggregator.schemas.base import StandardBaseModel

__all__ = ["SampleRecord"]


class SampleRecord(StandardBaseModel):
    """
    One load-test sample as reconstructed by a parser.

    Records are produced once per completed sample element, routed into the
    matching AggregatedResponses, and discarded.
    """

    uri: str = Field(default="", description="Requested location or sampler label")
    timestamp: int = Field(default=0, description="Sample start time in epoch ms")
    duration: int = Field(default=0, description="Elapsed time in ms, -1 if unknown")
    byte_count: int = Field(default=0, description="Response size, -1 if unknown")
    success: bool = Field(default=False, description="Sampler success flag")
    status_code: int = Field(default=0, description="HTTP response code")
    active_threads: int = Field(
        default=0, description="Number of active threads across all groups"
    )
    group_label: str = Field(
        default="", description="Thread group label the sample was produced by"
    )
