"""
Per-key aggregation of samples and the classification of failed samples.

AggregatedResponses bundles every accumulator kept for one aggregation key:
response duration, response size, active thread concurrency, status code
counts, the URIs seen per status code, and optional per-URI breakdowns. The
per-URI accumulators never retain raw samples, since the number of distinct
URIs in a result file is unbounded.
"""

from __future__ import annotations

import random

from pydantic import Field, PrivateAttr

from jmeter_aggregator.aggregation.accumulator import SampleAccumulator
from jmeter_aggregator.aggregation.status_codes import (
    CONNECTION_ERROR_STATUS,
    HTTP_ERROR_STATUS,
    StatusCodeHistogram,
)
from jmeter_aggregator.errors import AggregationStateError
from jmeter_aggregator.schemas import (
    AggregationConfig,
    SampleRecord,
    StandardBaseModel,
)

__all__ = ["AggregatedResponses", "is_failed_sample"]


def is_failed_sample(
    success: bool, byte_count: int, duration: int, status_code: int
) -> bool:
    """
    Decide whether a sample counts as failed.

    :param success: Sampler success flag
    :param byte_count: Response size, -1 if the size is unknown
    :param duration: Elapsed time, -1 if the duration is unknown
    :param status_code: Response status code
    :return: True for unsuccessful samples, unknown sizes or durations,
        4xx/5xx responses, and connection errors
    """
    return (
        not success
        or byte_count == -1
        or duration == -1
        or status_code >= HTTP_ERROR_STATUS
        or status_code == CONNECTION_ERROR_STATUS
    )


class AggregatedResponses(StandardBaseModel):
    """
    All statistics gathered for one aggregation key.

    Created on the first sample for a key, mutated only through `record`, and
    finalized exactly once through `finish`. `start` holds the timestamp of the
    first recorded sample (0 while unset) and `end` the timestamp of the most
    recently recorded one.
    """

    duration: SampleAccumulator = Field(
        default_factory=SampleAccumulator,
        description="Response times of successful samples, errors marked",
    )
    size: SampleAccumulator = Field(
        default_factory=SampleAccumulator,
        description="Response sizes of successful samples, errors marked",
    )
    active_threads: SampleAccumulator = Field(
        default_factory=SampleAccumulator,
        description="Active threads at sample completion time",
    )
    status_codes: StatusCodeHistogram = Field(
        default_factory=StatusCodeHistogram,
        description="Occurrences per response status code",
    )
    uris_by_status_code: dict[int, set[str]] = Field(
        default_factory=dict, description="Distinct URIs observed per status code"
    )
    size_by_uri: dict[str, SampleAccumulator] | None = Field(
        default=None, description="Non-retaining size statistics per URI"
    )
    duration_by_uri: dict[str, SampleAccumulator] | None = Field(
        default=None, description="Non-retaining duration statistics per URI"
    )
    start: int = Field(default=0, description="Timestamp of the first sample")
    end: int = Field(default=0, description="Timestamp of the last sample")

    _finished: bool = PrivateAttr(default=False)

    @classmethod
    def create(
        cls, config: AggregationConfig, rng: random.Random | None = None
    ) -> AggregatedResponses:
        """
        Build an empty bundle sized according to the aggregation config.

        :param config: Aggregation config providing retention and breakdown flags
        :param rng: Random source shared by the retaining accumulators
        :return: New AggregatedResponses with independent accumulators
        """
        rng = rng if rng is not None else random.Random(config.random_seed)

        return cls(
            duration=SampleAccumulator(
                capacity=config.max_samples, retain=True, rng=rng
            ),
            size=SampleAccumulator(capacity=config.max_samples, retain=False, rng=rng),
            active_threads=SampleAccumulator(
                capacity=config.max_samples, retain=True, rng=rng
            ),
            size_by_uri={} if config.size_by_uris else None,
            duration_by_uri={} if config.duration_by_uris else None,
        )

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def duration_seconds(self) -> float:
        """
        :return: Seconds between the first and last recorded sample
        """
        return (self.end - self.start) / 1000.0

    def record(
        self,
        uri: str,
        timestamp: int,
        byte_count: int,
        duration: int,
        active_threads: int,
        status_code: int,
        success: bool,
    ):
        """
        Classify one sample and fold it into the accumulators.

        Status code counts, the URI index, and concurrency are updated for every
        sample. Failed samples mark an error on the duration and size
        accumulators; successful ones add their values, including to the
        per-URI breakdowns when those are enabled.

        :param uri: Requested URI
        :param timestamp: Sample start time in epoch milliseconds
        :param byte_count: Response size, -1 if unknown
        :param duration: Elapsed time in milliseconds, -1 if unknown
        :param active_threads: Active threads across all groups
        :param status_code: Response status code
        :param success: Sampler success flag
        """
        self.status_codes.increment(status_code)
        self.uris_by_status_code.setdefault(status_code, set()).add(uri)

        # Concurrency is tracked at completion time of the request
        self.active_threads.add_sample(timestamp + duration, active_threads)

        if is_failed_sample(success, byte_count, duration, status_code):
            self.duration.add_error(timestamp)
            self.size.add_error(timestamp)
        else:
            self.size.add_sample(timestamp, byte_count)
            self.duration.add_sample(timestamp, duration)
            self._add_by_uri(self.size_by_uri, uri, timestamp, byte_count)
            self._add_by_uri(self.duration_by_uri, uri, timestamp, duration)

        if self.start == 0:
            self.start = timestamp
        self.end = timestamp

    def record_sample(self, record: SampleRecord):
        """
        Fold a reconstructed sample record into the accumulators.

        :param record: Parsed sample
        """
        self.record(
            uri=record.uri,
            timestamp=record.timestamp,
            byte_count=record.byte_count,
            duration=record.duration,
            active_threads=record.active_threads,
            status_code=record.status_code,
            success=record.success,
        )

    def finish(self):
        """
        Finalize every accumulator once the stream has ended.

        :raises AggregationStateError: If called more than once
        """
        if self._finished:
            raise AggregationStateError("Aggregated responses were already finished")

        self.duration.finish()
        self.size.finish()
        self.active_threads.finish()
        for breakdown in (self.size_by_uri, self.duration_by_uri):
            for accumulator in (breakdown or {}).values():
                accumulator.finish()

        self._finished = True

    @staticmethod
    def _add_by_uri(
        breakdown: dict[str, SampleAccumulator] | None,
        uri: str,
        timestamp: int,
        value: int,
    ):
        if breakdown is None:
            return

        accumulator = breakdown.get(uri)
        if accumulator is None:
            # Capacity 0: only running aggregates are kept per URI
            accumulator = SampleAccumulator(capacity=0, retain=False)
            breakdown[uri] = accumulator

        accumulator.add_sample(timestamp, value)
