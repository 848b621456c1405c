"""Discover the posts listed on a rendered profile page.

The page layout changed several times, so discovery is an ordered list of
tiers. A tier only runs when every tier before it found nothing; the first
tier that yields at least one post decides the result.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional, Sequence, Set, Tuple

from kemono_harvest.core.config import DEFAULT_BASE_URL
from kemono_harvest.core.models import PostRecord, PostSource
from kemono_harvest.core.scraping.normalizer import canonicalize_url, post_id_from_url
from kemono_harvest.core.scraping.parser import (
    Document,
    DocumentLike,
    as_document,
    attr_of,
    text_of,
)

log = logging.getLogger(__name__)

UNTITLED = "Untitled"

_HREF_POST_RE = re.compile(r"""href=["']([^"']*/post/[^"']+)["']""", re.IGNORECASE)

TierFn = Callable[[Document, str], List[PostRecord]]


class _TierResult:
    """Collects one tier's posts, keeping the first post for each id."""

    def __init__(self, source: PostSource) -> None:
        self.source = source
        self.posts: List[PostRecord] = []
        self._seen: Set[str] = set()

    def add(self, href: str, base_url: str, title: str = "", published=None) -> None:
        url = canonicalize_url(href, base_url)
        post_id = post_id_from_url(url)
        self.add_with_id(url, post_id, title, published)

    def add_with_id(self, url: str, post_id: str, title: str, published=None) -> None:
        if post_id in self._seen:
            return
        self._seen.add(post_id)
        self.posts.append(
            PostRecord(
                url=url,
                id=post_id,
                title=title or UNTITLED,
                published=published or None,
                source=self.source,
            )
        )


def posts_from_cards(doc: Document, base_url: str) -> List[PostRecord]:
    """Current layout: ``article.post-card`` with a data-id attribute."""
    result = _TierResult(PostSource.STRUCTURED_CARD)
    for card in doc.select("article.post-card"):
        href = attr_of(card.select_one("a.fancy-link"), "href")
        if not href:
            continue
        url = canonicalize_url(href, base_url)
        post_id = attr_of(card, "data-id") or post_id_from_url(url)
        title = text_of(card.select_one("header.post-card__header"))
        published = attr_of(card.select_one("time.timestamp"), "datetime")
        result.add_with_id(url, post_id, title, published)
    return result.posts


def posts_from_list_items(doc: Document, base_url: str) -> List[PostRecord]:
    """Older card list layout: ``.card-list__item`` wrapping a post link."""
    result = _TierResult(PostSource.LIST_ITEM)
    for item in doc.select(".card-list__item"):
        link = item.select_one('a[href*="/post/"]')
        href = attr_of(link, "href")
        if not href:
            continue
        title = attr_of(link, "title") or text_of(item.select_one(".card__title"))
        result.add(href, base_url, title)
    return result.posts


def posts_from_links(doc: Document, base_url: str) -> List[PostRecord]:
    """Any anchor pointing at a post."""
    result = _TierResult(PostSource.GENERIC_LINK)
    for link in doc.select('a[href*="/post/"]'):
        href = attr_of(link, "href")
        if not href:
            continue
        result.add(href, base_url, attr_of(link, "title") or text_of(link))
    return result.posts


def posts_from_source_scan(doc: Document, base_url: str) -> List[PostRecord]:
    """Last resort: regex over the raw markup, no element context."""
    result = _TierResult(PostSource.FALLBACK_SCAN)
    for match in _HREF_POST_RE.finditer(doc.source):
        result.add(match.group(1), base_url)
    return result.posts


POST_TIERS: Sequence[Tuple[PostSource, TierFn]] = (
    (PostSource.STRUCTURED_CARD, posts_from_cards),
    (PostSource.LIST_ITEM, posts_from_list_items),
    (PostSource.GENERIC_LINK, posts_from_links),
    (PostSource.FALLBACK_SCAN, posts_from_source_scan),
)


def extract_posts(
    document: DocumentLike,
    base_url: str = DEFAULT_BASE_URL,
    logger: Optional[logging.Logger] = None,
) -> List[PostRecord]:
    """Return the posts of a profile page using the first tier that finds any.

    An empty list means no tier matched; that is a normal outcome.
    """
    logger = logger or log
    doc = as_document(document)
    for source, tier in POST_TIERS:
        posts = tier(doc, base_url)
        if posts:
            logger.info("Found %d posts using the %s tier", len(posts), source.value)
            return posts
        logger.debug("No posts from the %s tier", source.value)
    logger.info("No posts found on the page")
    return []
