"""
Bounded-memory running statistics for one metric stream.

A SampleAccumulator keeps exact running aggregates (counts, sum, min, max,
variance) for every value it sees and, when retention is enabled, an unbiased
reservoir of at most `capacity` raw (timestamp, value) pairs for percentile
queries. Memory per accumulator is therefore O(capacity) regardless of how long
the result stream is.
"""

from __future__ import annotations

import math
import random

from pydantic import Field, NonNegativeInt, PrivateAttr, computed_field

from jmeter_aggregator.schemas import (
    DistributionSummary,
    Percentiles,
    StandardBaseModel,
)
from jmeter_aggregator.utils import safe_rate

__all__ = ["SampleAccumulator"]


class SampleAccumulator(StandardBaseModel):
    """
    Running statistics with optional reservoir retention for a metric stream.

    Successful samples update the exact aggregates and, if retention is active,
    the reservoir; errors are counted and timestamped but never contribute to
    sum, min, max, or retained values. A capacity of 0 disables retention
    regardless of the retain flag, which keeps per-URI breakdowns cheap.

    Example:
    ::
        durations = SampleAccumulator(capacity=1000, rng=random.Random(42))
        durations.add_sample(timestamp=1000, value=50)
        durations.add_error(timestamp=1100)
        durations.finish()
        durations.quantile(0.9)
    """

    capacity: NonNegativeInt = Field(
        default=0, description="Maximum number of retained samples, 0 disables"
    )
    retain: bool = Field(
        default=True, description="Whether raw samples are retained up to capacity"
    )
    success_count: int = Field(default=0, description="Number of successful samples")
    error_count: int = Field(default=0, description="Number of error markers")
    value_sum: int = Field(default=0, description="Exact sum of successful values")
    min: int | None = Field(default=None, description="Smallest successful value")
    max: int | None = Field(default=None, description="Largest successful value")
    first_timestamp: int | None = Field(
        default=None, description="Earliest timestamp seen for samples or errors"
    )
    last_timestamp: int | None = Field(
        default=None, description="Latest timestamp seen for samples or errors"
    )
    samples: list[tuple[int, int]] = Field(
        default_factory=list,
        description="Retained (timestamp, value) pairs, time ordered after finish",
    )
    rng: random.Random | None = Field(
        default=None,
        exclude=True,
        repr=False,
        description="Random source driving reservoir replacement, created on demand",
    )

    _mean: float = PrivateAttr(default=0.0)
    _m2: float = PrivateAttr(default=0.0)
    _sorted_values: list[int] | None = PrivateAttr(default=None)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def count(self) -> int:
        """
        :return: Total number of observations, successful and errored
        """
        return self.success_count + self.error_count

    @property
    def retains_samples(self) -> bool:
        """
        :return: True if raw samples are kept for percentile queries
        """
        return self.retain and self.capacity > 0

    @property
    def mean(self) -> float | None:
        """
        :return: Exact mean of successful values, or None if there are none
        """
        if self.success_count <= 0:
            return None

        return self.value_sum / self.success_count

    @property
    def std_dev(self) -> float | None:
        """
        :return: Exact population standard deviation of successful values
        """
        if self.success_count <= 0:
            return None

        return math.sqrt(self._m2 / self.success_count)

    @property
    def duration_seconds(self) -> float | None:
        """
        :return: Seconds between the first and last observation, or None
        """
        if self.first_timestamp is None or self.last_timestamp is None:
            return None

        return (self.last_timestamp - self.first_timestamp) / 1000.0

    @property
    def success_per_second(self) -> float | None:
        return safe_rate(self.success_count, self.duration_seconds)

    @property
    def errors_per_second(self) -> float | None:
        return safe_rate(self.error_count, self.duration_seconds)

    def add_sample(self, timestamp: int, value: int):
        """
        Record a successful value observed at the given timestamp.

        :param timestamp: Observation time in epoch milliseconds
        :param value: Metric value
        """
        self.success_count += 1
        self.value_sum += value
        self.min = value if self.min is None else min(self.min, value)
        self.max = value if self.max is None else max(self.max, value)

        # Welford's update keeps the variance exact without storing values
        delta = value - self._mean
        self._mean += delta / self.success_count
        self._m2 += delta * (value - self._mean)

        self._track_timestamp(timestamp)

        if self.retains_samples:
            self._retain(timestamp, value)

    def add_error(self, timestamp: int):
        """
        Record a failed observation at the given timestamp.

        :param timestamp: Observation time in epoch milliseconds
        """
        self.error_count += 1
        self._track_timestamp(timestamp)

    def finish(self):
        """
        Order the retained samples by time and cache their sorted values.

        Safe to call on an empty accumulator and safe to call again after more
        samples were added.
        """
        self.samples.sort(key=lambda sample: sample[0])
        self._sorted_values = sorted(value for _, value in self.samples)

    def sorted_values(self) -> list[int]:
        """
        :return: Retained values in ascending order
        """
        if self._sorted_values is None:
            return sorted(value for _, value in self.samples)

        return self._sorted_values

    def quantile(self, q: float) -> int | None:
        """
        Nearest-rank quantile over the retained samples.

        :param q: Quantile in the range [0, 1]
        :return: The retained value at the quantile, or None if nothing is retained
        :raises ValueError: If q is outside [0, 1]
        """
        if not 0.0 <= q <= 1.0:
            raise ValueError(f"Quantile must be within [0, 1], got {q}")

        values = self.sorted_values()
        if not values:
            return None

        # Rounding absorbs float error such as 0.9 * 100 == 90.00000000000001
        rank = max(math.ceil(round(q * len(values), 9)) - 1, 0)

        return values[rank]

    @property
    def percentiles(self) -> Percentiles | None:
        """
        :return: Standard percentiles of the retained samples, or None if empty
        """
        if not self.samples:
            return None

        return self.distribution().percentiles

    def distribution(self) -> DistributionSummary:
        """
        :return: Distribution summary of the retained samples
        """
        return DistributionSummary.from_values(self.sorted_values())

    def _track_timestamp(self, timestamp: int):
        if self.first_timestamp is None or timestamp < self.first_timestamp:
            self.first_timestamp = timestamp
        if self.last_timestamp is None or timestamp > self.last_timestamp:
            self.last_timestamp = timestamp

    def _retain(self, timestamp: int, value: int):
        self._sorted_values = None
        if self.rng is None:
            self.rng = random.Random()

        if len(self.samples) < self.capacity:
            self.samples.append((timestamp, value))
        elif self.capacity / self.success_count >= self.rng.random():
            # Reservoir sampling: keep the new value with probability s / n and
            # evict a uniformly chosen retained value, so every value seen so far
            # is retained with the same probability s / n.
            replace_index = self.rng.randrange(len(self.samples))
            self.samples[replace_index] = (timestamp, value)
