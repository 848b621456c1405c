import pytest
import requests

from kemono_harvest.core.scraping.fetcher import Fetcher
from kemono_harvest.extractors.post_api import PostApiExtractor
from kemono_harvest.extractors.post_html import PostHtmlExtractor

POST_URL = "https://kemono.cr/patreon/user/456/post/789"

POST_PAGE = """
<html><head><title>Sketches | Kemono</title></head><body>
  <h1 class="post__title">Sketches</h1>
  <div class="post__files">
    <a class="fileThumb" href="/data/aa/one.jpg" download="one.jpg"></a>
  </div>
  <div class="post__attachments">
    <div class="post__attachment"><a href="/data/bb/psd.zip">psd.zip</a></div>
  </div>
</body></html>
"""


def test_html_extractor_media_and_frame(monkeypatch):
    calls = []

    def fake_fetch(self, timeout=30):
        calls.append(self.url)
        return POST_PAGE

    monkeypatch.setattr(PostHtmlExtractor, "fetch_html", fake_fetch)

    ex = PostHtmlExtractor(url=POST_URL)
    assert ex.find_files() == [
        "https://kemono.cr/data/aa/one.jpg",
        "https://kemono.cr/data/bb/psd.zip",
    ]

    df = ex.extract()
    assert list(df["url"]) == ex.find_files()
    assert set(df["postId"]) == {"789"}
    assert set(df["postUrl"]) == {POST_URL}
    assert "mediaType" in df.columns
    assert "thumbnailUrl" in df.columns

    # the page is fetched once per extractor
    assert calls == [POST_URL]


def test_html_extractor_metadata(monkeypatch):
    monkeypatch.setattr(PostHtmlExtractor, "fetch_html", lambda self, timeout=30: POST_PAGE)

    meta = PostHtmlExtractor(url=POST_URL).metadata()

    assert meta.title == "Sketches"
    assert meta.id == "789"


def test_html_extractor_page_unavailable(monkeypatch):
    monkeypatch.setattr(PostHtmlExtractor, "fetch_html", lambda self, timeout=30: None)

    ex = PostHtmlExtractor(url=POST_URL)

    assert ex.media() == []
    assert ex.metadata() is None
    assert ex.extract().empty


def test_html_extractor_fetch_error_is_absorbed(monkeypatch):
    def boom(self, url):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(Fetcher, "get_html", boom)

    assert PostHtmlExtractor(url=POST_URL).fetch_html() is None


def test_html_extractor_uses_base_url_param(monkeypatch):
    monkeypatch.setattr(PostHtmlExtractor, "fetch_html", lambda self, timeout=30: POST_PAGE)

    ex = PostHtmlExtractor(url=POST_URL, params={"base_url": "https://kemono.su"})

    assert ex.find_files()[0] == "https://kemono.su/data/aa/one.jpg"


def test_api_extractor_endpoints():
    ex = PostApiExtractor(url=POST_URL)

    assert ex.endpoints() == [
        "https://kemono.cr/api/v1/patreon/user/456/post/789",
        "https://kemono.cr/api/patreon/user/456/post/789",
        "https://kemono.cr/api/v1/patreon/post/789",
        "https://kemono.cr/api/patreon/post/789",
    ]
    assert PostApiExtractor(url="https://kemono.cr/patreon/user/456").endpoints() == []


def test_api_extractor_falls_through_endpoints(monkeypatch):
    tried = []

    def fake_get_json(self, url):
        tried.append(url)
        if "/api/v1/" in url:
            raise requests.HTTPError("403 Forbidden")
        return {"post": {"file": {"path": "/data/cc/main.png", "name": "main.png"}}}

    monkeypatch.setattr(Fetcher, "get_json", fake_get_json)

    ex = PostApiExtractor(url=POST_URL)
    records = ex.media()

    assert tried == [
        "https://kemono.cr/api/v1/patreon/user/456/post/789",
        "https://kemono.cr/api/patreon/user/456/post/789",
    ]
    assert [r.url for r in records] == ["https://kemono.cr/data/cc/main.png"]
    assert records[0].type == "main"

    df = ex.extract()
    assert list(df["postId"]) == ["789"]
    # the payload is cached after the first successful call
    assert len(tried) == 2


def test_api_extractor_no_endpoint_answers(monkeypatch):
    def bad_json(self, url):
        raise ValueError("not json")

    monkeypatch.setattr(Fetcher, "get_json", bad_json)

    ex = PostApiExtractor(url=POST_URL)

    assert ex.fetch_payload() is None
    assert ex.media() == []
    assert ex.find_files() == []


def test_html_extractor_rejected_url_is_absorbed():
    ex = PostHtmlExtractor(url="http://127.0.0.1/patreon/user/1/post/2")

    assert ex.fetch_html() is None
    assert ex.media() == []


def test_extractors_declare_media():
    from kemono_harvest.core.interfaces import BaseExtractor

    assert "media" in BaseExtractor.__abstractmethods__

    class Incomplete(BaseExtractor):
        def extract(self):
            return None

        def find_files(self):
            return []

    with pytest.raises(TypeError):
        Incomplete(url=POST_URL)
