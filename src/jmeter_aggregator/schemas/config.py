"""
Configuration values consumed by the parsers and aggregation session.

An AggregationConfig is built once (directly, or from environment-driven
Settings) and passed explicitly into parsers; nothing in the aggregation path
reads configuration from module-level state.
"""

from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, Field, NonNegativeInt, PositiveInt, field_validator

from jmeter_aggregator.schemas.base import StandardBaseModel

__all__ = ["AggregationConfig", "ParserType", "RequestGroup"]


class ParserType(str, Enum):
    """
    Supported JMeter result layouts.

    DEFAULT reads one flat element per sample with attribute-encoded fields,
    WEB_DRIVER rebuilds samples from nested leaf elements.
    """

    DEFAULT = "default"
    WEB_DRIVER = "web_driver"


class RequestGroup(StandardBaseModel):
    """
    Ant-style URI pattern and the aggregation label assigned to matching samples.
    """

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(description="Ant-style path pattern, e.g. /api/user/*")
    label: str = Field(description="Aggregation key for URIs matching the pattern")


class AggregationConfig(StandardBaseModel):
    """
    Immutable configuration for a single aggregation run.

    Example:
    ::
        config = AggregationConfig(
            max_samples=10000,
            request_groups=[RequestGroup(pattern="/api/user/*", label="users")],
            parser_type=ParserType.WEB_DRIVER,
        )
    """

    model_config = ConfigDict(frozen=True)

    max_samples: NonNegativeInt = Field(
        default=50000,
        description=(
            "Number of raw samples retained per primary metric for percentile "
            "queries; 0 disables retention"
        ),
    )
    request_groups: list[RequestGroup] = Field(
        default_factory=list,
        description=(
            "Ordered URI patterns; when set, samples are grouped by the first "
            "matching pattern's label instead of by thread group"
        ),
    )
    size_by_uris: bool = Field(
        default=False,
        description="Whether to keep a response size breakdown per distinct URI",
    )
    duration_by_uris: bool = Field(
        default=False,
        description="Whether to keep a response duration breakdown per distinct URI",
    )
    node_names: frozenset[str] = Field(
        default=frozenset({"httpSample", "sample"}),
        description="Element names (local or qualified) that delimit one sample",
    )
    parser_type: ParserType = Field(
        default=ParserType.DEFAULT,
        description="Layout of the result document",
    )
    unmatched_group: str | None = Field(
        default=None,
        description=(
            "Key for samples matching none of the request groups; None falls back "
            "to the sample's thread group label"
        ),
    )
    progress_interval: PositiveInt = Field(
        default=10000,
        description="Number of parsed samples between progress log messages",
    )
    read_chunk_size: PositiveInt = Field(
        default=65536,
        description="Number of characters or bytes read from the stream per chunk",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for reservoir sampling when no random source is injected",
    )

    @field_validator("node_names", mode="before")
    @classmethod
    def split_node_names(cls, value):
        if isinstance(value, str):
            return frozenset(name.strip() for name in value.split(",") if name.strip())
        return value
