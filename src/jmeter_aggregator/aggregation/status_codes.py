"""
Exact occurrence counts per response status code.
"""

from __future__ import annotations

from collections.abc import ItemsView

from pydantic import Field

from jmeter_aggregator.schemas import StandardBaseModel

__all__ = ["CONNECTION_ERROR_STATUS", "HTTP_ERROR_STATUS", "StatusCodeHistogram"]

HTTP_ERROR_STATUS = 400
"Lowest status code treated as a failed request (4xx client, 5xx server)"

CONNECTION_ERROR_STATUS = -1
"Reserved status code for samples that never received a transport-level response"


class StatusCodeHistogram(StandardBaseModel):
    """
    Counter of observed status codes; entries are only ever added or incremented.
    """

    counts: dict[int, int] = Field(
        default_factory=dict, description="Occurrences keyed by status code"
    )

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def increment(self, status_code: int, amount: int = 1):
        self.counts[status_code] = self.counts.get(status_code, 0) + amount

    def get(self, status_code: int) -> int:
        return self.counts.get(status_code, 0)

    def codes(self) -> list[int]:
        return sorted(self.counts)

    def items(self) -> ItemsView[int, int]:
        return self.counts.items()
