import pytest
from pydantic import ValidationError

from kemono_harvest.core.config import DEFAULT_BASE_URL, HarvestConfig


def _cfg(**overrides):
    data = {
        "job_name": "Artist_Profile",
        "source_url": "https://kemono.cr/patreon/user/12345",
        "execution_date": "2026-01-02",
    }
    data.update(overrides)
    return HarvestConfig(**data)


def test_defaults_and_slug():
    cfg = _cfg()
    assert cfg.job_name == "artist_profile"
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.source_type == "html"
    assert cfg.download is False
    assert cfg.manifest_path == "data/manifests/artist_profile/data_captura=2026-01-02"


def test_base_url_trailing_slash_is_stripped():
    assert _cfg(base_url="https://kemono.su/").base_url == "https://kemono.su"


@pytest.mark.parametrize(
    "overrides",
    [
        {"job_name": "has spaces"},
        {"source_type": "ftp"},
        {"environment": "qa"},
        {"max_posts": 0},
        {"base_url": "kemono.cr"},
    ],
)
def test_invalid_config_is_rejected(overrides):
    with pytest.raises(ValidationError):
        _cfg(**overrides)
