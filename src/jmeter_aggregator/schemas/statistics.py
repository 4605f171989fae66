"""
Distribution summaries computed over retained metric samples.

Provides percentile and summary statistics for the bounded sample sets that
retaining accumulators keep. The summaries describe the retained sample only;
exact running aggregates (count, sum, min, max) live on the accumulator itself.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from pydantic import Field

from jmeter_aggregator.schemas.base import StandardBaseModel

__all__ = ["PERCENTILE_PROBS", "DistributionSummary", "Percentiles"]

PERCENTILE_PROBS: dict[str, float] = {
    "p001": 0.001,
    "p01": 0.01,
    "p05": 0.05,
    "p10": 0.1,
    "p25": 0.25,
    "p50": 0.5,
    "p75": 0.75,
    "p90": 0.9,
    "p95": 0.95,
    "p99": 0.99,
    "p999": 0.999,
}


class Percentiles(StandardBaseModel):
    """
    Standard percentile values for a retained sample distribution.

    Captures key percentile points from the 0.1th to the 99.9th percentile so
    reports can show central tendency and tail behavior of response times and
    concurrency levels.
    """

    p001: float = Field(description="0.1th percentile value")
    p01: float = Field(description="1st percentile value")
    p05: float = Field(description="5th percentile value")
    p10: float = Field(description="10th percentile value")
    p25: float = Field(description="25th percentile value")
    p50: float = Field(description="50th percentile (median) value")
    p75: float = Field(description="75th percentile value")
    p90: float = Field(description="90th percentile value")
    p95: float = Field(description="95th percentile value")
    p99: float = Field(description="99th percentile value")
    p999: float = Field(description="99.9th percentile value")

    @classmethod
    def from_pdf(
        cls, pdf: np.ndarray, epsilon: float = 1e-6, validate: bool = True
    ) -> Percentiles:
        """
        Create percentiles from a probability density function.

        :param pdf: 2D array (N, 2) with sorted values in column 0 and
            probabilities in column 1
        :param epsilon: Tolerance for probability sum validation
        :param validate: Whether to validate probabilities sum to 1 and are
            non-negative
        :return: Percentiles object with computed values
        :raises ValueError: If PDF shape is invalid, probabilities are negative,
            or probabilities don't sum to 1
        """
        if len(pdf.shape) != 2 or pdf.shape[1] != 2:  # noqa: PLR2004
            raise ValueError(
                "PDF must be a 2D array of shape (N, 2) where first column is values "
                f"and second column is probabilities. Got {pdf.shape} instead."
            )

        if pdf.shape[0] == 0:
            return Percentiles(**dict.fromkeys(PERCENTILE_PROBS.keys(), 0.0))

        probabilities = pdf[:, 1]

        if validate:
            if np.any(probabilities < 0):
                raise ValueError("Probabilities must be non-negative.")

            prob_sum = np.sum(probabilities)
            if abs(prob_sum - 1.0) > epsilon:
                raise ValueError(f"Probabilities must sum to 1, got {prob_sum}.")

        cdf_probs = np.cumsum(probabilities)
        last_index = pdf.shape[0] - 1

        return Percentiles(
            **{
                key: pdf[
                    min(
                        np.searchsorted(cdf_probs, value - epsilon, side="left"),
                        last_index,
                    ),
                    0,
                ].item()
                for key, value in PERCENTILE_PROBS.items()
            }
        )


class DistributionSummary(StandardBaseModel):
    """
    Statistical summary of a retained sample distribution.

    Captures central tendency (mean, median, mode), spread (variance, std_dev),
    extrema (min, max), and percentiles. Built from the reservoir of a retaining
    accumulator, so every value describes an unbiased sample of the stream rather
    than the full stream.
    """

    mean: float = Field(description="Mean/average value")
    median: float = Field(description="Median (50th percentile) value")
    mode: float = Field(description="Mode (most probable) value")
    variance: float = Field(description="Variance of the distribution")
    std_dev: float = Field(description="Standard deviation")
    min: float = Field(description="Minimum value")
    max: float = Field(description="Maximum value")
    count: int = Field(description="Number of observations")
    total_sum: float = Field(description="Sum of all values")
    percentiles: Percentiles = Field(description="Standard percentile values")

    @classmethod
    def from_pdf(cls, pdf: np.ndarray, count: int | None = None) -> DistributionSummary:
        """
        Create distribution summary from a sorted probability density function.

        :param pdf: 2D array (N, 2) with ascending values in column 0 and
            probabilities in column 1
        :param count: Number of original observations; defaults to PDF length
        :return: Complete distribution summary with statistics
        """
        if pdf.shape[0] == 0:
            return DistributionSummary(
                mean=0.0,
                median=0.0,
                mode=0.0,
                variance=0.0,
                std_dev=0.0,
                min=0.0,
                max=0.0,
                count=0 if count is None else count,
                total_sum=0.0,
                percentiles=Percentiles.from_pdf(pdf),
            )

        values = pdf[:, 0]
        probabilities = pdf[:, 1]

        percentiles = Percentiles.from_pdf(pdf, validate=False)
        mean = np.sum(values * probabilities).item()
        mode = values[np.argmax(probabilities)].item()
        variance = np.sum((values - mean) ** 2 * probabilities).item()

        if count is None:
            count = len(pdf)

        return DistributionSummary(
            mean=mean,
            median=percentiles.p50,
            mode=mode,
            variance=variance,
            std_dev=math.sqrt(variance),
            min=values[0].item(),
            max=values[-1].item(),
            count=count,
            total_sum=mean * count,
            percentiles=percentiles,
        )

    @classmethod
    def from_values(
        cls, values: Sequence[float] | np.ndarray, count: int | None = None
    ) -> DistributionSummary:
        """
        Create distribution summary from equally weighted raw values.

        :param values: Sample values, in any order
        :param count: Number of original observations; defaults to len(values)
        :return: Distribution summary computed from the values
        """
        np_values = np.asarray(values, dtype=float).reshape(-1)

        if np_values.shape[0] == 0:
            return DistributionSummary.from_pdf(pdf=np.empty((0, 2)), count=count)

        # Combine duplicate values by summing their weights
        unique_values, occurrences = np.unique(np_values, return_counts=True)
        probabilities = occurrences / np_values.shape[0]
        pdf = np.column_stack((unique_values, probabilities))

        return DistributionSummary.from_pdf(
            pdf=pdf, count=count if count is not None else int(np_values.shape[0])
        )
