from __future__ import annotations

import random

import pytest

from jmeter_aggregator.aggregation import SampleAccumulator
from jmeter_aggregator.schemas import DistributionSummary, Percentiles


class TestSampleAccumulator:
    """Tests for the bounded-memory SampleAccumulator."""

    @pytest.mark.smoke
    def test_initialization(self):
        """Test a new accumulator reports no data."""
        accumulator = SampleAccumulator(capacity=10)

        assert accumulator.count == 0
        assert accumulator.success_count == 0
        assert accumulator.error_count == 0
        assert accumulator.value_sum == 0
        assert accumulator.min is None
        assert accumulator.max is None
        assert accumulator.mean is None
        assert accumulator.std_dev is None
        assert accumulator.samples == []
        assert accumulator.retains_samples is True

    @pytest.mark.smoke
    def test_running_aggregates(self, rng):
        """Test count, sum, min, max, mean and std_dev are exact."""
        accumulator = SampleAccumulator(capacity=3, rng=rng)
        values = [2, 4, 4, 4, 5, 5, 7, 9]
        for index, value in enumerate(values):
            accumulator.add_sample(1000 + index, value)

        assert accumulator.success_count == len(values)
        assert accumulator.count == len(values)
        assert accumulator.value_sum == sum(values)
        assert accumulator.min == 2
        assert accumulator.max == 9
        assert accumulator.mean == pytest.approx(5.0)
        assert accumulator.std_dev == pytest.approx(2.0)

    @pytest.mark.smoke
    def test_errors_do_not_touch_values(self):
        """Test error markers are counted but excluded from value aggregates."""
        accumulator = SampleAccumulator(capacity=10)
        accumulator.add_sample(1000, 50)
        accumulator.add_error(1100)
        accumulator.add_error(1200)

        assert accumulator.count == 3
        assert accumulator.success_count == 1
        assert accumulator.error_count == 2
        assert accumulator.value_sum == 50
        assert accumulator.min == 50
        assert accumulator.max == 50
        assert accumulator.samples == [(1000, 50)]
        assert accumulator.first_timestamp == 1000
        assert accumulator.last_timestamp == 1200

    @pytest.mark.sanity
    @pytest.mark.parametrize("capacity", [1, 5, 100])
    def test_retention_never_exceeds_capacity(self, capacity, rng):
        """Test the reservoir size is bounded by capacity at all times."""
        accumulator = SampleAccumulator(capacity=capacity, rng=rng)
        for index in range(1000):
            accumulator.add_sample(index, index)
            assert len(accumulator.samples) <= capacity

        assert len(accumulator.samples) == capacity
        assert accumulator.success_count == 1000

    @pytest.mark.sanity
    @pytest.mark.parametrize("retain", [True, False])
    def test_zero_capacity_never_retains(self, retain):
        """Test capacity 0 disables retention regardless of the retain flag."""
        accumulator = SampleAccumulator(capacity=0, retain=retain)
        for index in range(500):
            accumulator.add_sample(index, index)

        assert accumulator.retains_samples is False
        assert accumulator.samples == []
        assert accumulator.rng is None
        assert accumulator.value_sum == sum(range(500))

    @pytest.mark.sanity
    def test_retain_flag_disables_retention(self):
        """Test retain=False keeps running aggregates only."""
        accumulator = SampleAccumulator(capacity=100, retain=False)
        for index in range(10):
            accumulator.add_sample(index, index)

        assert accumulator.retains_samples is False
        assert accumulator.samples == []
        assert accumulator.max == 9

    @pytest.mark.sanity
    def test_reservoir_keeps_late_samples(self):
        """Test retention covers the whole stream, not only its start."""
        accumulator = SampleAccumulator(capacity=1000, rng=random.Random(42))
        for index in range(10000):
            accumulator.add_sample(index, index)

        retained = [value for _, value in accumulator.samples]
        assert len(retained) == 1000
        assert any(value >= 9000 for value in retained)
        assert sum(retained) / len(retained) == pytest.approx(4999.5, abs=400)

    @pytest.mark.regression
    def test_reservoir_inclusion_is_uniform(self):
        """Test every stream position is retained with equal probability."""
        rng = random.Random(7)
        trials = 1000
        stream_length = 50
        capacity = 5
        inclusions = [0] * stream_length

        for _ in range(trials):
            accumulator = SampleAccumulator(capacity=capacity, rng=rng)
            for index in range(stream_length):
                accumulator.add_sample(index, index)
            for _, value in accumulator.samples:
                inclusions[value] += 1

        expected = trials * 10 * capacity / stream_length
        assert sum(inclusions[:10]) == pytest.approx(expected, rel=0.15)
        assert sum(inclusions[-10:]) == pytest.approx(expected, rel=0.15)

    @pytest.mark.sanity
    def test_injected_random_source_is_deterministic(self):
        """Test identical seeds retain identical samples."""
        first = SampleAccumulator(capacity=10, rng=random.Random(3))
        second = SampleAccumulator(capacity=10, rng=random.Random(3))
        for index in range(200):
            first.add_sample(index, index * 2)
            second.add_sample(index, index * 2)

        assert first.samples == second.samples

    @pytest.mark.smoke
    def test_finish_orders_samples_by_time(self):
        """Test finish sorts retained samples by timestamp."""
        accumulator = SampleAccumulator(capacity=10)
        accumulator.add_sample(3000, 1)
        accumulator.add_sample(1000, 3)
        accumulator.add_sample(2000, 2)
        accumulator.finish()

        assert accumulator.samples == [(1000, 3), (2000, 2), (3000, 1)]
        assert accumulator.sorted_values() == [1, 2, 3]

    @pytest.mark.smoke
    def test_finish_without_samples(self):
        """Test finishing and querying an empty accumulator is defined."""
        accumulator = SampleAccumulator(capacity=10)
        accumulator.finish()

        assert accumulator.quantile(0.5) is None
        assert accumulator.percentiles is None
        summary = accumulator.distribution()
        assert isinstance(summary, DistributionSummary)
        assert summary.count == 0

    @pytest.mark.sanity
    @pytest.mark.parametrize(
        ("q", "expected"),
        [(0.0, 1), (0.5, 50), (0.9, 90), (0.95, 95), (1.0, 100)],
    )
    def test_quantile_nearest_rank(self, q, expected):
        """Test quantiles use the nearest-rank method over retained values."""
        accumulator = SampleAccumulator(capacity=100)
        for value in random.Random(5).sample(range(1, 101), 100):
            accumulator.add_sample(value, value)
        accumulator.finish()

        assert accumulator.quantile(q) == expected

    @pytest.mark.sanity
    def test_quantile_before_finish(self):
        """Test quantiles are available without calling finish first."""
        accumulator = SampleAccumulator(capacity=10)
        for value in (5, 1, 3):
            accumulator.add_sample(0, value)

        assert accumulator.quantile(0.5) == 3

    @pytest.mark.sanity
    @pytest.mark.parametrize("q", [-0.1, 1.5])
    def test_quantile_invalid(self, q):
        """Test quantiles outside [0, 1] are rejected."""
        accumulator = SampleAccumulator(capacity=10)

        with pytest.raises(ValueError, match="Quantile"):
            accumulator.quantile(q)

    @pytest.mark.sanity
    def test_percentiles(self):
        """Test standard percentiles over retained values."""
        accumulator = SampleAccumulator(capacity=100)
        for value in range(1, 101):
            accumulator.add_sample(value, value)
        accumulator.finish()

        percentiles = accumulator.percentiles
        assert isinstance(percentiles, Percentiles)
        assert percentiles.p50 == 50
        assert percentiles.p90 == 90
        assert percentiles.p999 == 100

    @pytest.mark.sanity
    def test_rates(self):
        """Test per-second rates over the observed time window."""
        accumulator = SampleAccumulator(capacity=10)
        accumulator.add_sample(0, 10)
        accumulator.add_error(1000)
        accumulator.add_sample(2000, 20)

        assert accumulator.duration_seconds == pytest.approx(2.0)
        assert accumulator.success_per_second == pytest.approx(1.0)
        assert accumulator.errors_per_second == pytest.approx(0.5)

    @pytest.mark.sanity
    def test_rates_without_window(self):
        """Test rates are None when no time has elapsed."""
        accumulator = SampleAccumulator()
        assert accumulator.duration_seconds is None
        assert accumulator.success_per_second is None

        accumulator.add_sample(1000, 1)
        assert accumulator.duration_seconds == 0.0
        assert accumulator.success_per_second is None

    @pytest.mark.regression
    def test_serialization(self, rng):
        """Test dumps include the total count and exclude the random source."""
        accumulator = SampleAccumulator(capacity=2, rng=rng)
        accumulator.add_sample(1000, 7)
        accumulator.add_error(1001)

        dumped = accumulator.model_dump()
        assert "rng" not in dumped
        assert dumped["count"] == 2
        assert dumped["samples"] == [(1000, 7)]
        assert dumped["value_sum"] == 7
