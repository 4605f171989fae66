"""
State of one aggregation run over a single result stream.
"""

from __future__ import annotations

import random

from jmeter_aggregator.aggregation.grouping import GroupKeyResolver
from jmeter_aggregator.aggregation.responses import AggregatedResponses
from jmeter_aggregator.logger import logger
from jmeter_aggregator.schemas import AggregationConfig, SampleRecord

__all__ = ["AggregationSession"]


class AggregationSession:
    """
    Routes parsed samples into per-key AggregatedResponses.

    A session exclusively owns its key to AggregatedResponses mapping; keys keep
    the order in which they were first seen. Sessions are single use: parsers
    create a new one for every stream they aggregate.

    :param config: Aggregation config for the run
    :param resolver: Resolver mapping samples to keys; built from config if None
    :param rng: Random source for reservoir sampling; seeded from config if None
    """

    def __init__(
        self,
        config: AggregationConfig,
        resolver: GroupKeyResolver | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config
        self.resolver = resolver or GroupKeyResolver(
            config.request_groups, config.unmatched_group
        )
        self.rng = rng if rng is not None else random.Random(config.random_seed)
        self.results: dict[str, AggregatedResponses] = {}
        self.parsed_count = 0

    def add(self, record: SampleRecord) -> str:
        """
        Resolve the key of a parsed sample and record it.

        :param record: Completed sample
        :return: Aggregation key the sample was recorded under
        """
        key = self.resolver.resolve(record.uri, record.group_label)
        responses = self.results.get(key)
        if responses is None:
            responses = AggregatedResponses.create(self.config, self.rng)
            self.results[key] = responses

        responses.record_sample(record)
        self.parsed_count += 1

        if self.parsed_count % self.config.progress_interval == 0:
            logger.info(f"Parsed {self.parsed_count} entries ...")

        return key

    def finish(self) -> dict[str, AggregatedResponses]:
        """
        Finalize every AggregatedResponses after the stream ended.

        :return: Mapping of aggregation key to results in first-seen key order
        """
        for responses in self.results.values():
            responses.finish()

        logger.info(f"Finished parsing {self.parsed_count} entries.")

        return self.results
