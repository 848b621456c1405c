"""
Profile harvesting flow

Prefect flow that walks one creator profile and collects the media of every
post it lists:

1. Validate the job configuration (`HarvestConfig`).
2. Fetch the rendered profile page and discover its posts and the creator
   name.
3. For each post, run the extractor registered for `source_type` (rendered
   page or JSON API) to collect its media records.
4. Write a manifest (one row per media record) under `manifest_path`.
5. When `download` is enabled, save every media file under
   `<destination_path>/<creator>/<post id>/`.

A post or file that fails to load (HTTP error, or a url rejected by
`validate_url`) is logged and skipped; the rest of the profile is
still processed.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd
import requests
from prefect import flow, get_run_logger

from kemono_harvest.core.config import HarvestConfig
from kemono_harvest.core.models import MediaRecord, records_to_frame
from kemono_harvest.core.scraping.normalizer import sanitize_filename
from kemono_harvest.core.scraping.prefect_tasks import (
    download_media_task,
    extract_post_media_task,
    extract_posts_task,
    fetch_html_task,
)
from kemono_harvest.services.storage_backends import LocalStorage


def save_manifest(df: pd.DataFrame, path: str) -> str:
    return LocalStorage().upload(df, path, format="csv")


@flow(name="Kemono Profile Harvest", log_prints=True)
def harvest_profile_flow(config_dict: dict) -> pd.DataFrame:
    """Collect the media manifest of one profile.

    config_dict: must conform to `HarvestConfig`.
    """
    logger = get_run_logger()
    try:
        config = HarvestConfig(**config_dict)
        logger.info("Config valid for job: %s", config.job_name)
    except Exception as e:
        logger.error("Invalid config: %s", e)
        raise

    html = fetch_html_task(config.source_url, base_url=config.base_url)
    profile = extract_posts_task(html, config.source_url, base_url=config.base_url)
    username = profile["username"]
    posts = profile["posts"]
    if config.max_posts:
        posts = posts[: config.max_posts]

    frames: List[pd.DataFrame] = []
    for post in posts:
        try:
            records: List[MediaRecord] = extract_post_media_task(
                post, source_type=config.source_type, base_url=config.base_url
            )
        except (requests.RequestException, ValueError) as exc:
            logger.error("Post %s failed: %s", post.url, exc)
            continue

        df = records_to_frame(records)
        if not df.empty:
            df["postUrl"] = post.url
            df["postId"] = post.id
            df["postTitle"] = post.title
            frames.append(df)

        if config.download:
            post_dir = (
                Path(config.destination_path)
                / (sanitize_filename(username) or "unknown_user")
                / (sanitize_filename(post.id) or "unknown")
            )
            for index, record in enumerate(records):
                try:
                    download_media_task(record, dest_dir=str(post_dir), index=index)
                except (requests.RequestException, OSError, ValueError) as exc:
                    logger.error("Download of %s failed: %s", record.url, exc)

    manifest = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    if manifest.empty:
        logger.info("Job %s found no media.", config.job_name)
        return manifest

    manifest["creator"] = username
    out = save_manifest(manifest, config.manifest_path)
    logger.info(
        "Job %s completed. %d media files from %d posts, manifest at %s",
        config.job_name,
        len(manifest),
        len(posts),
        out,
    )
    return manifest


if __name__ == "__main__":
    payload = {
        "job_name": "example_profile",
        "environment": "dev",
        "source_type": "html",
        "source_url": "https://kemono.cr/patreon/user/12345",
        "max_posts": 5,
        "destination_path": "data",
    }
    harvest_profile_flow(payload)
