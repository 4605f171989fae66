"""
Resolution of samples to aggregation keys.

Samples are grouped either by the label of the first configured request group
whose Ant-style pattern matches the sample URI, or by the sample's thread group
label. Patterns let reports collapse dynamic URIs such as /api/user/123 and
/api/user/456 into one logical endpoint.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache

from jmeter_aggregator.schemas import RequestGroup

__all__ = ["AntPathMatcher", "GroupKeyResolver"]

PATH_SEPARATOR = "/"
_SEGMENT_TOKENS = re.compile(r"\*|\?|\{[^/{}]+\}")


class AntPathMatcher:
    """
    Matches paths against Ant-style patterns.

    - `?` matches one character within a path segment
    - `*` matches zero or more characters within a path segment
    - `**` as a whole segment matches zero or more segments
    - `{name}` matches one or more characters within a path segment
    """

    def match(self, pattern: str, path: str) -> bool:
        return self.compile(pattern).fullmatch(path) is not None

    @staticmethod
    @lru_cache(maxsize=256)
    def compile(pattern: str) -> re.Pattern[str]:
        """
        Translate an Ant-style pattern into an anchored regular expression.

        :param pattern: Ant-style path pattern
        :return: Compiled expression to be used with fullmatch
        """
        segments = pattern.split(PATH_SEPARATOR)
        if segments == ["**"]:
            return re.compile(".*", re.DOTALL)

        regex = ""
        skip_separator = False
        for index, segment in enumerate(segments):
            if segment == "**":
                if index == 0:
                    # Leading **/ may also match nothing at all
                    regex += f"(?:.*{PATH_SEPARATOR})?"
                    skip_separator = True
                else:
                    regex += f"(?:{PATH_SEPARATOR}.*)?"
                continue

            if index > 0 and not skip_separator:
                regex += re.escape(PATH_SEPARATOR)
            skip_separator = False
            regex += AntPathMatcher._translate_segment(segment)

        return re.compile(regex, re.DOTALL)

    @staticmethod
    def _translate_segment(segment: str) -> str:
        translated = ""
        position = 0
        for token in _SEGMENT_TOKENS.finditer(segment):
            translated += re.escape(segment[position : token.start()])
            if token.group() == "*":
                translated += "[^/]*"
            elif token.group() == "?":
                translated += "[^/]"
            else:
                translated += "[^/]+"
            position = token.end()

        return translated + re.escape(segment[position:])


class GroupKeyResolver:
    """
    Maps a sample to its aggregation key.

    Example:
    ::
        resolver = GroupKeyResolver(
            [
                RequestGroup(pattern="/api/user/*", label="users"),
                RequestGroup(pattern="/api/**", label="api"),
            ]
        )
        resolver.resolve("/api/user/7", "Checkout")  # "users"
        resolver.resolve("/static/app.js", "Checkout")  # "Checkout"

    :param request_groups: Ordered request groups; the first match wins
    :param unmatched_group: Key used when request groups are configured but none
        matches; None falls back to the sample's group label
    """

    def __init__(
        self,
        request_groups: Sequence[RequestGroup] | None = None,
        unmatched_group: str | None = None,
    ):
        self.request_groups: tuple[RequestGroup, ...] = tuple(request_groups or ())
        self.unmatched_group = unmatched_group
        self._compiled = [
            (AntPathMatcher.compile(group.pattern), group.label)
            for group in self.request_groups
        ]

    def resolve(self, uri: str, group_label: str) -> str:
        """
        :param uri: Sample URI tested against the request group patterns
        :param group_label: Thread group label carried by the sample
        :return: Aggregation key for the sample
        """
        if not self._compiled:
            return group_label

        for regex, label in self._compiled:
            if regex.fullmatch(uri) is not None:
                return label

        return self.unmatched_group if self.unmatched_group is not None else group_label
