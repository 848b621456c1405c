"""Prefect tasks wrapping the scraping components.

Each task is a thin adapter around a core function (fetch a page, run an
extractor, download a file) that adds run logging. The Prefect run logger is
handed to the extractors so their diagnostics end up in the flow run log.
Tasks run once; a failed request is reported to the flow, not retried.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from prefect import get_run_logger, task

from kemono_harvest.core.config import DEFAULT_BASE_URL
from kemono_harvest.core.models import MediaRecord, PostRecord
from kemono_harvest.core.scraping.downloader import Downloader
from kemono_harvest.core.scraping.fetcher import Fetcher
from kemono_harvest.extractors.factory import get_extractor
from kemono_harvest.extractors.metadata import extract_username
from kemono_harvest.extractors.posts import extract_posts


@task(name="fetch_html", retries=0)
def fetch_html_task(url: str, timeout: int = 30, base_url: str = DEFAULT_BASE_URL) -> str:
    logger = get_run_logger()
    logger.info("Fetching URL: %s", url)
    html = Fetcher(timeout=timeout, base_url=base_url).get_html(url)
    logger.info("Fetched %s (%d chars)", url, len(html))
    return html


@task(name="extract_posts", retries=0)
def extract_posts_task(
    html: str, profile_url: str, base_url: str = DEFAULT_BASE_URL
) -> Dict[str, Any]:
    """Return the profile's username and its posts."""
    logger = get_run_logger()
    posts = extract_posts(html, base_url, logger=logger)
    username = extract_username(html, profile_url)
    logger.info("Profile %s: %d posts by %s", profile_url, len(posts), username)
    return {"username": username, "posts": posts}


@task(name="extract_post_media", retries=0)
def extract_post_media_task(
    post: PostRecord, source_type: str = "html", base_url: str = DEFAULT_BASE_URL
) -> List[MediaRecord]:
    logger = get_run_logger()
    ExtractorClass = get_extractor(source_type)
    extractor = ExtractorClass(
        url=post.url, params={"base_url": base_url, "logger": logger}
    )
    records = extractor.media()
    logger.info("Post %s: %d media files", post.id, len(records))
    return records


@task(name="download_media", retries=0)
def download_media_task(
    record: MediaRecord, dest_dir: str = "data", index: int = 0
) -> Optional[str]:
    logger = get_run_logger()
    info = Downloader().download(record, dest_dir, index)
    if info.get("skipped") == "true":
        logger.info("Skipped existing file %s", info.get("path"))
    else:
        logger.info("Saved file %s (size=%s bytes)", info.get("path"), info.get("size"))
    return info.get("path")
