from __future__ import annotations

import pytest

from jmeter_aggregator.aggregation import AntPathMatcher, GroupKeyResolver
from jmeter_aggregator.schemas import RequestGroup


class TestAntPathMatcher:
    """Tests for Ant-style path matching."""

    @pytest.mark.smoke
    @pytest.mark.parametrize(
        ("pattern", "path", "expected"),
        [
            ("/api/user/*", "/api/user/123", True),
            ("/api/user/*", "/api/user/", True),
            ("/api/user/*", "/api/user/123/orders", False),
            ("/api/user/*", "/api/users/123", False),
            ("/api/**", "/api/user/123/orders", True),
            ("/api/**", "/api", True),
            ("/api/**", "/apix/user", False),
            ("/api/**/orders", "/api/orders", True),
            ("/api/**/orders", "/api/user/7/orders", True),
            ("/api/**/orders", "/api/user/7/items", False),
            ("/img/?.png", "/img/a.png", True),
            ("/img/?.png", "/img/ab.png", False),
            ("/img/*.png", "/img/logo.png", True),
            ("/img/*.png", "/img/logo.jpg", False),
            ("/api/{id}/detail", "/api/42/detail", True),
            ("/api/{id}/detail", "/api//detail", False),
            ("**/*.js", "/static/js/app.js", True),
            ("**/*.js", "app.js", True),
            ("**", "/anything/at/all", True),
            ("/search.do", "/search.do", True),
            ("/search.do", "/searchXdo", False),
        ],
    )
    def test_match(self, pattern, path, expected):
        assert AntPathMatcher().match(pattern, path) is expected

    @pytest.mark.sanity
    def test_compile_is_cached(self):
        assert AntPathMatcher.compile("/a/*") is AntPathMatcher.compile("/a/*")


class TestGroupKeyResolver:
    """Tests for GroupKeyResolver."""

    @pytest.mark.smoke
    def test_without_patterns_uses_group_label(self):
        resolver = GroupKeyResolver()

        assert resolver.resolve("/api/user/7", "Checkout") == "Checkout"

    @pytest.mark.smoke
    def test_first_matching_pattern_wins(self):
        resolver = GroupKeyResolver(
            [
                RequestGroup(pattern="/api/user/*", label="users"),
                RequestGroup(pattern="/api/**", label="api"),
            ]
        )

        for _ in range(3):
            assert resolver.resolve("/api/user/7", "Checkout") == "users"
        assert resolver.resolve("/api/orders/7", "Checkout") == "api"

    @pytest.mark.sanity
    def test_order_is_significant(self):
        resolver = GroupKeyResolver(
            [
                RequestGroup(pattern="/api/**", label="api"),
                RequestGroup(pattern="/api/user/*", label="users"),
            ]
        )

        assert resolver.resolve("/api/user/7", "Checkout") == "api"

    @pytest.mark.sanity
    def test_unmatched_falls_back_to_group_label(self):
        resolver = GroupKeyResolver([RequestGroup(pattern="/api/**", label="api")])

        assert resolver.resolve("/static/app.js", "Browse") == "Browse"

    @pytest.mark.sanity
    def test_unmatched_group(self):
        resolver = GroupKeyResolver(
            [RequestGroup(pattern="/api/**", label="api")], unmatched_group="other"
        )

        assert resolver.resolve("/static/app.js", "Browse") == "other"
        assert resolver.resolve("/api/x", "Browse") == "api"

    @pytest.mark.regression
    def test_unmatched_group_ignored_without_patterns(self):
        resolver = GroupKeyResolver(unmatched_group="other")

        assert resolver.resolve("/static/app.js", "Browse") == "Browse"
