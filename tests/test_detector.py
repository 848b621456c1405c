from kemono_harvest.core.models import MediaType
from kemono_harvest.core.scraping.detector import (
    classify_media_type,
    is_archive_url,
    is_downloadable_url,
    is_image_url,
    is_media_url,
    is_video_url,
)


def test_classify_by_extension():
    assert classify_media_type("https://x/a.JPG") == MediaType.IMAGE
    assert classify_media_type("https://x/a.webp?f=a.webp") == MediaType.IMAGE
    assert classify_media_type("https://x/clip.mp4?token=1") == MediaType.VIDEO
    assert classify_media_type("https://x/pack.tar.gz") == MediaType.ARCHIVE
    assert classify_media_type("https://x/pack.7z") == MediaType.ARCHIVE
    assert classify_media_type("https://x/page.html") == MediaType.UNKNOWN


def test_classify_edge_cases():
    assert classify_media_type("") == MediaType.UNKNOWN
    assert classify_media_type(None) == MediaType.UNKNOWN
    assert classify_media_type("https://x/a.jpgx") == MediaType.UNKNOWN


def test_video_wins_over_image():
    # a video whose fragment mentions an image name is still a video
    assert classify_media_type("https://x/v.mkv#poster.jpg") == MediaType.VIDEO


def test_family_predicates():
    assert is_image_url("/data/a.png")
    assert not is_image_url("/data/a.mp4")
    assert is_video_url("/data/a.ogv")
    assert is_archive_url("/data/a.rar")
    assert is_media_url("/data/a.gif")
    assert not is_media_url("/data/a.zip")


def test_downloadable_excludes_documents():
    assert is_downloadable_url("/data/a.zip")
    assert is_downloadable_url("https://x/a.jpeg")
    assert not is_downloadable_url("/document.pdf")
    assert not is_downloadable_url("/art.psd")
    assert not is_downloadable_url("")
