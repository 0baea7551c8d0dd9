"""Tests for UrlRewriter."""

import logging

import pytest

from scraper.crawler.rewriter import UrlRewriter


class TestRewrite:
    """Single-pass literal substitution."""

    def test_default_rules_upgrade_scheme(self) -> None:
        rewriter = UrlRewriter()
        assert (
            rewriter.rewrite("http://en.wikipedia.org/wiki/Bavaria")
            == "https://en.wikipedia.org/wiki/Bavaria"
        )

    def test_default_rules_map_mobile_origin(self) -> None:
        rewriter = UrlRewriter()
        assert (
            rewriter.rewrite("https://en.m.wikipedia.org/wiki/Hesse")
            == "https://en.wikipedia.org/wiki/Hesse"
        )

    def test_no_match_is_noop(self) -> None:
        rewriter = UrlRewriter({"about:///": "https://example.org/"})
        assert rewriter.rewrite("https://other.org/x") == "https://other.org/x"

    def test_replaces_every_occurrence(self) -> None:
        rewriter = UrlRewriter({"a": "b"})
        assert rewriter.rewrite("banana") == "bbnbnb"

    def test_rules_apply_in_order_without_restart(self) -> None:
        # The second rule produces the first rule's key, which is left alone.
        rewriter = UrlRewriter({"x": "y", "z": "x"})
        assert rewriter.rewrite("xz") == "yx"

    def test_empty_table(self) -> None:
        assert UrlRewriter({}).rewrite("https://a/b") == "https://a/b"

    @pytest.mark.parametrize(
        "url",
        [
            "http://en.wikipedia.org/wiki/Berlin",
            "https://en.m.wikipedia.org/wiki/Saxony",
            "http://en.m.wikipedia.org/wiki/Saxony",
            "https://en.wikipedia.org/wiki/Bremen",
            "file:///tmp/page.html",
        ],
    )
    def test_default_rules_are_idempotent(self, url: str) -> None:
        rewriter = UrlRewriter()
        once = rewriter.rewrite(url)
        assert rewriter.rewrite(once) == once


class TestStability:
    """Detection of tables whose values contain rule keys."""

    def test_default_table_is_stable(self) -> None:
        assert UrlRewriter().is_stable()

    def test_unstable_table_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="scraper.crawler.rewriter"):
            rewriter = UrlRewriter({"http://": "http://mirror/http://"})

        assert not rewriter.is_stable()
        assert "not idempotent" in caplog.text


def test_mobile_http_url_is_fully_rewritten_in_one_pass() -> None:
    rewriter = UrlRewriter()
    assert (
        rewriter.rewrite("http://en.m.wikipedia.org/wiki/Saxony")
        == "https://en.wikipedia.org/wiki/Saxony"
    )
