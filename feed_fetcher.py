#!/usr/bin/env python3
"""
Feed Title Fetcher
==================
Downloads an RSS 2.0 or Atom feed and extracts the item titles, so they can
be piped into the generator one title per line.

Usage:
    titles = fetch_feed_titles("https://example.com/feed.xml")

    fetcher = FeedFetcher(timeout=5)
    titles = fetcher.fetch("https://example.com/atom")
"""

import http.client
import logging
import ssl
import xml.etree.ElementTree as ET
from typing import Optional
from urllib.parse import urljoin, urlsplit

from settings import get_setting


logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (301, 302, 303, 307, 308)
ITEM_TAGS = ('item', 'entry')


class FeedError(Exception):
    """Raised when a feed cannot be downloaded or parsed."""


def _local_name(tag: str) -> str:
    """Strip an XML namespace: '{http://www.w3.org/2005/Atom}entry' -> 'entry'."""
    if '}' in tag:
        return tag.rsplit('}', 1)[1]
    return tag


def parse_feed_titles(document) -> list[str]:
    """
    Extract item titles from an RSS or Atom document.

    Args:
        document: Feed XML as bytes or str

    Returns:
        Whitespace-normalized titles in document order. Items without a
        title contribute an empty string.

    Raises:
        FeedError: If the document is not well-formed XML
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as e:
        raise FeedError(f"Malformed feed: {e}") from e

    titles = []
    for element in root.iter():
        if not isinstance(element.tag, str) or _local_name(element.tag) not in ITEM_TAGS:
            continue
        title = ''
        for child in element:
            if isinstance(child.tag, str) and _local_name(child.tag) == 'title':
                title = ' '.join(''.join(child.itertext()).split())
                break
        titles.append(title)
    return titles


class FeedFetcher:
    """
    Fetches feeds over HTTP(S) with redirect support.

    Example:
        fetcher = FeedFetcher()
        for title in fetcher.fetch("https://example.com/rss"):
            print(title)
    """

    def __init__(self, timeout: Optional[float] = None,
                 max_redirects: Optional[int] = None,
                 user_agent: Optional[str] = None):
        """
        Initialize feed fetcher.

        Args:
            timeout: Socket timeout in seconds (default: feed.timeout_seconds)
            max_redirects: Redirects to follow (default: feed.max_redirects)
            user_agent: User-Agent header (default: feed.user_agent)
        """
        cfg = get_setting("feed", {}) or {}
        if timeout is None:
            timeout = cfg.get("timeout_seconds")
        if timeout is None:
            raise ValueError("feed.timeout_seconds must be set in app.yaml")
        self.timeout = timeout

        if max_redirects is None:
            max_redirects = cfg.get("max_redirects")
        if max_redirects is None:
            raise ValueError("feed.max_redirects must be set in app.yaml")
        self.max_redirects = max_redirects

        if user_agent is None:
            user_agent = cfg.get("user_agent")
        if not user_agent:
            raise ValueError("feed.user_agent must be set in app.yaml")
        self.user_agent = user_agent

    def _connect(self, scheme: str, netloc: str) -> http.client.HTTPConnection:
        if scheme == 'https':
            return http.client.HTTPSConnection(
                netloc,
                context=ssl.create_default_context(),
                timeout=self.timeout,
            )
        return http.client.HTTPConnection(netloc, timeout=self.timeout)

    def _get(self, url: str) -> tuple[int, Optional[str], bytes]:
        """Perform a single GET. Returns (status, location header, body)."""
        parts = urlsplit(url)
        if parts.scheme not in ('http', 'https'):
            raise FeedError(f"Unsupported URL scheme: {url}")
        if not parts.netloc:
            raise FeedError(f"Missing host in URL: {url}")

        path = parts.path or '/'
        if parts.query:
            path = f"{path}?{parts.query}"

        conn = self._connect(parts.scheme, parts.netloc)
        try:
            conn.request("GET", path, headers={
                'User-Agent': self.user_agent,
                'Accept': 'application/rss+xml, application/atom+xml, application/xml, text/xml',
            })
            response = conn.getresponse()
            body = response.read()
            return response.status, response.getheader('Location'), body
        except (OSError, http.client.HTTPException) as e:
            raise FeedError(f"Request to {url} failed: {e}") from e
        finally:
            conn.close()

    def download(self, url: str) -> bytes:
        """Download a feed document, following redirects."""
        current = url
        for _ in range(self.max_redirects + 1):
            status, location, body = self._get(current)
            if status == 200:
                return body
            if status in REDIRECT_STATUSES and location:
                target = urljoin(current, location)
                logger.debug(f"Redirect {status}: {current} -> {target}")
                current = target
                continue
            raise FeedError(f"Unexpected HTTP status {status} from {current}")
        raise FeedError(f"Too many redirects (>{self.max_redirects}) fetching {url}")

    def fetch(self, url: str) -> list[str]:
        """Download a feed and return its item titles."""
        titles = parse_feed_titles(self.download(url))
        logger.info(f"Fetched {len(titles)} titles from {url}")
        return titles


def fetch_feed_titles(url: str, timeout: Optional[float] = None) -> list[str]:
    """Fetch the item titles of the feed at ``url``."""
    return FeedFetcher(timeout=timeout).fetch(url)


__all__ = [
    "FeedError",
    "FeedFetcher",
    "fetch_feed_titles",
    "parse_feed_titles",
]
