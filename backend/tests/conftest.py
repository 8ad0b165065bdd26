"""Shared fixtures: sample feeds and candidate builders."""
from datetime import datetime, timezone

import pytest

from goodfeed.models import Candidate, Category
from goodfeed.sources.common import make_article_id

RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Good News Network</title>
    <link>https://example.org</link>
    <item>
      <title>Volunteers restore coral reef</title>
      <link>https://example.org/coral</link>
      <description><![CDATA[<p>A community of volunteers &amp; divers brought the reef back.</p>]]></description>
      <pubDate>Mon, 15 Jan 2024 10:30:00 +0000</pubDate>
      <dc:creator>Jane Doe</dc:creator>
      <media:content url="https://img.example.org/coral.jpg" medium="image"/>
      <content:encoded><![CDATA[<p>Full story <img src="https://img.example.org/inline.png"/></p>]]></content:encoded>
    </item>
    <item>
      <title>   </title>
      <link>https://example.org/no-title</link>
      <description>Dropped</description>
    </item>
    <item>
      <title>Missing link</title>
      <description>Dropped too</description>
    </item>
    <item>
      <title>Library opens for kids</title>
      <link>https://example.org/library</link>
      <description>&lt;b&gt;Readers&lt;/b&gt; celebrate &amp;amp; cheer</description>
      <enclosure url="https://example.org/audio.mp3" type="audio/mpeg"/>
      <pubDate>Tue, 16 Jan 2024 08:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""

ATOM_FEED = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Positive News</title>
  <entry>
    <title>Rescued owl returns to the wild</title>
    <link rel="alternate" href="https://example.com/owl"/>
    <link rel="enclosure" href="https://example.com/owl.mp3"/>
    <published>2024-01-17T09:15:00Z</published>
    <updated>2024-01-18T09:15:00Z</updated>
    <author><name>Sam Lee</name></author>
    <summary type="html">&lt;p&gt;The owl was &lt;img src='https://example.com/owl.webp'&gt; released.&lt;/p&gt;</summary>
    <source><title>Wrong title</title></source>
  </entry>
</feed>
"""


def build_candidate(
    title="Volunteers celebrate inspiring rescue",
    description="A wonderful community effort",
    content=None,
    sentiment=0.9,
    url="https://example.org/story",
    published_at=None,
    category=Category.GOOD_NEWS,
):
    return Candidate(
        id=make_article_id(url),
        title=title,
        description=description,
        content=content,
        article_url=url,
        published_at=published_at or datetime(2024, 1, 15, tzinfo=timezone.utc),
        source_name="Test Source",
        category=category,
        sentiment_score=sentiment,
    )


@pytest.fixture
def rss_feed():
    return RSS_FEED


@pytest.fixture
def atom_feed():
    return ATOM_FEED


@pytest.fixture
def make_candidate():
    return build_candidate
