"""
Streaming RSS 2.0 / Atom parser and feed fetcher.

The parser is a small state machine driven by the token stream of
``XMLPullParser``. Dialects are not told apart structurally: Atom element
names are aliases for the RSS accumulator slots.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from html.entities import name2codepoint
from typing import Dict, List, Optional
from xml.etree.ElementTree import Element, ParseError, XMLPullParser

import httpx

from goodfeed.config import get_settings, http_headers
from goodfeed.models import RawItem
from goodfeed.sources.errors import InvalidURLError, NetworkError, ParsingFailed
from goodfeed.sources.markup import clean
from goodfeed.utils import normalize_text

logger = logging.getLogger(__name__)

ITEM_ELEMENTS = frozenset({"item", "entry"})
MEDIA_ELEMENTS = frozenset({"media:content", "media:thumbnail"})

# Element name -> accumulator slot (case-sensitive)
SLOT_BY_ELEMENT: Dict[str, str] = {
    "title": "title",
    "description": "description",
    "summary": "description",
    "link": "link",
    "pubDate": "pub_date",
    "published": "pub_date",
    "updated": "pub_date",
    "dc:creator": "author",
    "author": "author",
    "content:encoded": "content",
    "content": "content",
}

# Prefixes used for well-known namespaces regardless of what the feed declares
CANONICAL_PREFIXES: Dict[str, str] = {
    "http://search.yahoo.com/mrss/": "media",
    "http://purl.org/rss/1.0/modules/content/": "content",
    "http://purl.org/dc/elements/1.1/": "dc",
}

IMAGE_SRC_PATTERNS = (
    re.compile(r'src="([^"]+\.(?:jpg|jpeg|png|gif|webp)[^"]*)"', re.IGNORECASE),
    re.compile(r"src='([^']+\.(?:jpg|jpeg|png|gif|webp)[^']*)'", re.IGNORECASE),
)

XML_PREDEFINED_ENTITIES = frozenset({b"amp", b"lt", b"gt", b"quot", b"apos"})
NAMED_REFERENCE = re.compile(rb"&([A-Za-z][A-Za-z0-9]*);")
CDATA_SECTION = re.compile(rb"(<!\[CDATA\[.*?\]\]>)", re.DOTALL)
BARE_AMPERSAND = re.compile(rb"&(?!#[0-9]+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)")


class ParserState(Enum):
    OUTSIDE = "outside"
    INSIDE_ITEM = "inside_item"


def extract_image_url(html: str) -> Optional[str]:
    """Return the first ``src`` pointing at an image file, if any."""
    if not html:
        return None
    for pattern in IMAGE_SRC_PATTERNS:
        match = pattern.search(html)
        if match:
            return match.group(1)
    return None


class FeedParser:
    """
    Turns a feed byte stream into ``RawItem`` records.

    One instance per parse. Push bytes with :meth:`feed` as they arrive;
    each call returns the items completed so far. Call :meth:`close` at the
    end of the stream.
    """

    def __init__(self) -> None:
        self._pull = XMLPullParser(events=("start", "end", "start-ns"))
        self._prefixes: Dict[str, str] = {}
        self._depth = 0
        self._item_depth = 0
        self.state = ParserState.OUTSIDE
        self._fields: Dict[str, str] = {}
        self._image_url = ""

    def feed(self, chunk: bytes) -> List[RawItem]:
        try:
            self._pull.feed(chunk)
            return self._drain()
        except ParseError as e:
            raise ParsingFailed(str(e)) from e

    def close(self) -> List[RawItem]:
        try:
            self._pull.close()
            return self._drain()
        except ParseError as e:
            raise ParsingFailed(str(e)) from e

    def _drain(self) -> List[RawItem]:
        items: List[RawItem] = []
        for event, payload in self._pull.read_events():
            if event == "start-ns":
                prefix, uri = payload
                self._prefixes[uri] = prefix
            elif event == "start":
                self._depth += 1
                self._on_start(self._qualified_name(payload.tag), payload)
            else:
                item = self._on_end(self._qualified_name(payload.tag), payload)
                self._depth -= 1
                if item is not None:
                    items.append(item)
        return items

    def _qualified_name(self, tag: str) -> str:
        if not tag.startswith("{"):
            return tag
        uri, _, local = tag[1:].partition("}")
        prefix = CANONICAL_PREFIXES.get(uri, self._prefixes.get(uri, ""))
        return f"{prefix}:{local}" if prefix else local

    def _reset_item(self) -> None:
        self._fields = {slot: "" for slot in set(SLOT_BY_ELEMENT.values())}
        self._image_url = ""

    def _on_start(self, name: str, element: Element) -> None:
        if name in ITEM_ELEMENTS:
            self.state = ParserState.INSIDE_ITEM
            self._item_depth = self._depth
            self._reset_item()
            return

        if self.state is not ParserState.INSIDE_ITEM:
            return

        attrs = element.attrib
        if name in MEDIA_ELEMENTS:
            if attrs.get("url"):
                self._image_url = attrs["url"]
        elif name == "enclosure":
            if attrs.get("url") and attrs.get("type", "").startswith("image"):
                self._image_url = attrs["url"]
        elif name == "link" and self._depth == self._item_depth + 1:
            # Atom carries the article link in href
            href = (attrs.get("href") or "").strip()
            if href and attrs.get("rel", "alternate") == "alternate" and not self._fields["link"]:
                self._fields["link"] = href

    def _on_end(self, name: str, element: Element) -> Optional[RawItem]:
        if self.state is not ParserState.INSIDE_ITEM:
            return None

        if name in ITEM_ELEMENTS and self._depth == self._item_depth:
            item = self._build_item()
            self.state = ParserState.OUTSIDE
            self._fields = {}
            element.clear()
            return item

        slot = SLOT_BY_ELEMENT.get(name)
        if slot is None or self._depth != self._item_depth + 1:
            return None

        # First element to fill a slot wins (Atom may carry both published and updated)
        text = "".join(element.itertext()).strip()
        if text and not self._fields[slot]:
            self._fields[slot] = text
        return None

    def _build_item(self) -> Optional[RawItem]:
        fields = self._fields
        title = normalize_text(fields["title"])
        link = fields["link"].strip()
        if not title or not link:
            logger.debug("Dropping feed item without title or link (title=%r, link=%r)", title, link)
            return None

        raw_content = fields["content"]
        raw_description = fields["description"]
        image_url = self._image_url or extract_image_url(raw_content or raw_description)

        return RawItem(
            title=title,
            description=clean(raw_description),
            link=link,
            pub_date=fields["pub_date"].strip(),
            image_url=image_url or None,
            author=fields["author"].strip() or None,
            content=clean(raw_content) or None,
        )


def repair_entities(data: bytes) -> bytes:
    """
    Make a feed with HTML-style entities well-formed XML.

    Bare ampersands are escaped and HTML named entities unknown to XML are
    rewritten as numeric references. Unknown names become literal text.
    CDATA sections pass through untouched.
    """

    def _named(match: re.Match) -> bytes:
        name = match.group(1)
        if name in XML_PREDEFINED_ENTITIES:
            return match.group(0)
        codepoint = name2codepoint.get(name.decode("ascii"))
        if codepoint is None:
            return b"&amp;" + name + b";"
        return b"&#%d;" % codepoint

    # CDATA text is already literal, only markup outside it is rewritten
    parts = CDATA_SECTION.split(data)
    for i in range(0, len(parts), 2):
        parts[i] = NAMED_REFERENCE.sub(_named, BARE_AMPERSAND.sub(b"&amp;", parts[i]))
    return b"".join(parts)


def _parse_once(data: bytes) -> List[RawItem]:
    parser = FeedParser()
    items = parser.feed(data)
    items.extend(parser.close())
    return items


def parse_feed(data: bytes | str) -> List[RawItem]:
    """
    Parse a complete feed document.

    A document that is not well-formed gets one entity-repair pass before
    giving up.

    Args:
        data: Raw feed payload (UTF-8 or declared encoding)

    Returns:
        Items with both a title and a link, in document order

    Raises:
        ParsingFailed: If the document cannot be parsed even after repair
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    try:
        return _parse_once(data)
    except ParsingFailed as first_error:
        repaired = repair_entities(data)
        if repaired == data:
            raise
        logger.debug("Retrying feed after entity repair: %s", first_error.reason)
        return _parse_once(repaired)


def validate_feed_url(url: str) -> httpx.URL:
    """Return the parsed URL or raise ``InvalidURLError``."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidURLError(url) from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidURLError(url)
    return parsed


async def _get_and_parse(client: httpx.AsyncClient, target: httpx.URL, url: str) -> List[RawItem]:
    try:
        response = await client.get(target, follow_redirects=True)
    except httpx.HTTPError as e:
        raise NetworkError(url, detail=str(e) or type(e).__name__) from e

    if not response.is_success:
        raise NetworkError(url, status_code=response.status_code)

    return parse_feed(response.content)


async def fetch_and_parse(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> List[RawItem]:
    """
    Fetch a feed over HTTP and parse it. No retries.

    Args:
        url: Feed URL
        client: Shared client; a short-lived one is created when omitted
        timeout: Request timeout for the short-lived client (seconds)

    Returns:
        Parsed feed items

    Raises:
        InvalidURLError: If the URL is malformed or not http(s)
        NetworkError: On transport failure, timeout or a non-2xx status
        ParsingFailed: If the payload is not a parseable feed
    """
    target = validate_feed_url(url)

    if client is not None:
        return await _get_and_parse(client, target, url)

    settings = get_settings()
    async with httpx.AsyncClient(
        headers=http_headers(settings),
        timeout=timeout or settings.HTTP_TIMEOUT_SECONDS,
    ) as own_client:
        return await _get_and_parse(own_client, target, url)
