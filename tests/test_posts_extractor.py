"""Post discovery on profile pages.

Each tier is exercised on its own page layout, and the short-circuit
between tiers is checked by mixing layouts on one page.
"""

from kemono_harvest.core.scraping.parser import parse_document
from kemono_harvest.extractors.posts import (
    POST_TIERS,
    extract_posts,
    posts_from_links,
)

CARDS_HTML = """
<html><body>
  <article class="post-card" data-id="111">
    <a class="fancy-link" href="/patreon/user/456/post/111">
      <header class="post-card__header"> First post </header>
      <time class="timestamp" datetime="2024-01-01T00:00:00">Jan 1</time>
    </a>
  </article>
  <article class="post-card" data-id="222">
    <a class="fancy-link" href="https://kemono.cr/patreon/user/456/post/222">
      <header class="post-card__header"></header>
    </a>
  </article>
  <div class="card-list__item"><a href="/patreon/user/456/post/999">Listed</a></div>
</body></html>
"""

LIST_HTML = """
<div class="card-list__items">
  <div class="card-list__item">
    <a href="/patreon/user/456/post/333"><span class="card__title">From card title</span></a>
  </div>
</div>
<a href="/patreon/user/456/post/444">not reached</a>
"""

LINKS_HTML = """
<a href="/fanbox/user/1/post/10">Ten</a>
<a href="/fanbox/user/1/post/10">Ten again</a>
<a href="/fanbox/user/1/post/11" title="Eleven"></a>
<a href="/fanbox/user/1/post/12"></a>
<a href="/fanbox/user/1">profile</a>
"""

SCAN_HTML = """
<html><head>
<link rel="prefetch" href="/patreon/user/1/post/77">
<link rel="prefetch" href='/patreon/user/1/post/77'>
<link rel="prefetch" href="/patreon/user/1/post/78?o=0">
</head><body></body></html>
"""


class RecordingLogger:
    def __init__(self):
        self.messages = []

    def _record(self, msg, *args):
        self.messages.append(msg % args if args else msg)

    info = debug = warning = error = _record


def test_structured_cards_tier():
    posts = extract_posts(CARDS_HTML)

    assert len(posts) == 2
    first, second = posts
    assert first.url == "https://kemono.cr/patreon/user/456/post/111"
    assert first.id == "111"
    assert first.title == "First post"
    assert first.published == "2024-01-01T00:00:00"
    assert first.source == "structured-card"
    assert second.url == "https://kemono.cr/patreon/user/456/post/222"
    assert second.title == "Untitled"
    assert second.published is None


def test_cards_short_circuit_later_tiers():
    posts = extract_posts(CARDS_HTML)
    assert {p.source for p in posts} == {"structured-card"}
    assert "999" not in {p.id for p in posts}


def test_list_item_tier_when_no_cards():
    posts = extract_posts(LIST_HTML)

    assert len(posts) == 1
    assert posts[0].source == "list-item"
    assert posts[0].id == "333"
    assert posts[0].title == "From card title"


def test_list_item_title_attribute_wins():
    html = '<div class="card-list__item"><a href="/x/user/1/post/5" title="Attr"><span class="card__title">Span</span></a></div>'
    posts = extract_posts(html)
    assert posts[0].title == "Attr"


def test_generic_link_tier_dedupes_by_id():
    posts = extract_posts(LINKS_HTML)

    assert [p.id for p in posts] == ["10", "11", "12"]
    assert [p.title for p in posts] == ["Ten", "Eleven", "Untitled"]
    assert {p.source for p in posts} == {"generic-link"}
    assert posts[0].url == "https://kemono.cr/fanbox/user/1/post/10"


def test_fallback_scan_tier():
    posts = extract_posts(SCAN_HTML)

    assert [p.id for p in posts] == ["77", "78"]
    assert posts[0].url == "https://kemono.cr/patreon/user/1/post/77"
    assert all(p.title == "Untitled" for p in posts)
    assert all(p.source == "fallback-scan" for p in posts)


def test_no_posts_is_empty_list():
    assert extract_posts("<html><body><p>nothing here</p></body></html>") == []
    assert extract_posts("") == []


def test_relative_urls_use_base_url():
    posts = extract_posts(LINKS_HTML, base_url="https://kemono.su")
    assert posts[0].url == "https://kemono.su/fanbox/user/1/post/10"


def test_tiers_are_ordered_and_testable_alone():
    assert [source.value for source, _ in POST_TIERS] == [
        "structured-card",
        "list-item",
        "generic-link",
        "fallback-scan",
    ]
    # the generic tier on its own also sees the card page's links
    doc = parse_document(CARDS_HTML)
    ids = [p.id for p in posts_from_links(doc, "https://kemono.cr")]
    assert ids == ["111", "222", "999"]


def test_extraction_is_repeatable():
    for html in (CARDS_HTML, LIST_HTML, LINKS_HTML, SCAN_HTML):
        assert extract_posts(html) == extract_posts(html)


def test_injected_logger_receives_diagnostics():
    log = RecordingLogger()
    extract_posts(LIST_HTML, logger=log)
    assert "Found 1 posts using the list-item tier" in log.messages
