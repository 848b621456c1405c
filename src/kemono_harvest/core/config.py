from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "https://kemono.cr"


class HarvestConfig(BaseModel):
    """
    Contract for one harvesting job.
    Everything the flow needs to walk a profile and collect its media.
    """

    job_name: str
    environment: str = Field(default="dev", pattern="^(dev|staging|prod)$")
    source_type: str = Field(default="html", pattern="^(html|api)$")

    # Source
    source_url: str
    base_url: str = DEFAULT_BASE_URL
    max_posts: Optional[int] = Field(default=None, gt=0)

    # Destination
    destination_path: str = "data"
    download: bool = False

    execution_date: str = Field(
        default_factory=lambda: datetime.now().strftime("%Y-%m-%d")
    )

    @property
    def manifest_path(self) -> str:
        """Default location of the media manifest.

        Format: <destination_path>/manifests/<job_name>/data_captura=YYYY-MM-DD
        """
        return (
            f"{self.destination_path}/manifests/"
            f"{self.job_name}/data_captura={self.execution_date}"
        )

    @field_validator("job_name")
    def job_name_must_be_slug(cls, v):
        if " " in v:
            raise ValueError("job_name must not contain spaces")
        return v.lower()

    @field_validator("base_url")
    def base_url_must_be_origin(cls, v):
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v
