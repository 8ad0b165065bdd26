"""Tests for publish-date parsing and article ids."""

from datetime import datetime, timedelta, timezone

import pytest

from goodfeed.sources.common import make_article_id, parse_published_at

UTC = timezone.utc


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Mon, 15 Jan 2024 10:30:00 +0000", datetime(2024, 1, 15, 10, 30, tzinfo=UTC)),
        ("Mon, 15 Jan 2024 10:30:00 -0500", datetime(2024, 1, 15, 15, 30, tzinfo=UTC)),
        ("2024-01-17T09:15:00Z", datetime(2024, 1, 17, 9, 15, tzinfo=UTC)),
        ("2024-01-17T11:15:00+02:00", datetime(2024, 1, 17, 9, 15, tzinfo=UTC)),
        ("2024-01-17T09:15:00.123Z", datetime(2024, 1, 17, 9, 15, 0, 123000, tzinfo=UTC)),
        ("Tue, 16 Jan 2024 08:00:00 GMT", datetime(2024, 1, 16, 8, 0, tzinfo=UTC)),
        ("Tue, 16 Jan 2024 08:00:00 EST", datetime(2024, 1, 16, 13, 0, tzinfo=UTC)),
        ("  Tue, 16 Jan 2024 08:00:00 PDT  ", datetime(2024, 1, 16, 15, 0, tzinfo=UTC)),
    ],
)
def test_parse_published_at_supported_formats(raw, expected):
    parsed = parse_published_at(raw)

    assert parsed == expected
    assert parsed.tzinfo is not None


@pytest.mark.parametrize("raw", ["", None, "yesterday", "16/01/2024", "Tue, 16 Jan 2024 08:00:00 XYZ"])
def test_parse_published_at_falls_back_to_now(raw):
    """Unparseable dates default to the current time instead of failing."""
    before = datetime.now(UTC) - timedelta(seconds=1)
    parsed = parse_published_at(raw)
    after = datetime.now(UTC) + timedelta(seconds=1)

    assert before <= parsed <= after


def test_article_id_depends_only_on_url():
    url = "https://example.org/story?id=1"

    assert make_article_id(url) == make_article_id(url)
    assert make_article_id(url) != make_article_id(url + "0")
    assert len(make_article_id(url)) == 32


def test_article_id_distinguishes_long_urls_with_shared_prefix():
    prefix = "https://example.org/" + "a" * 200

    assert make_article_id(prefix + "/one") != make_article_id(prefix + "/two")
