"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

COMMIT_KEY_CANDIDATES = ("commit", "commit_hash")
DEFAULT_REPOSITORY_URL = "https://github.com/jackkalsched/portfolio/commit/"


class PlotLayout(BaseModel):
    """Fixed drawing geometry of the scatterplot, in plot pixel space."""

    width: int = Field(1000, gt=0, description="Total plot width")
    height: int = Field(600, gt=0, description="Total plot height")
    margin_top: int = Field(10, ge=0)
    margin_right: int = Field(10, ge=0)
    margin_bottom: int = Field(30, ge=0)
    margin_left: int = Field(20, ge=0)

    @property
    def usable_left(self) -> float:
        return float(self.margin_left)

    @property
    def usable_right(self) -> float:
        return float(self.width - self.margin_right)

    @property
    def usable_top(self) -> float:
        return float(self.margin_top)

    @property
    def usable_bottom(self) -> float:
        return float(self.height - self.margin_bottom)

    @property
    def usable_width(self) -> float:
        return self.usable_right - self.usable_left

    @property
    def usable_height(self) -> float:
        return self.usable_bottom - self.usable_top


class DatasetColumns(BaseModel):
    """Columns resolved once from the header of a loaded dataset."""

    commit_key: str = Field("commit", description="Column holding the commit identifier")
    has_file: bool = Field(True, description="Whether per-line file paths are available")
    has_language: bool = Field(True, description="Whether per-line type tags are available")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are prefixed with COMMITLENS_ (e.g., COMMITLENS_COMMIT_KEY).
    """

    model_config = SettingsConfigDict(
        env_prefix="COMMITLENS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    repository_url: str = Field(
        default=DEFAULT_REPOSITORY_URL,
        description="Base URL that commit ids are appended to",
    )

    # None means: probe the header once for one of COMMIT_KEY_CANDIDATES
    commit_key: Optional[str] = Field(
        default=None,
        description="Name of the column holding the commit identifier",
    )

    datetime_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Primary strptime pattern for the datetime column",
    )

    nice_time_axis: bool = Field(
        default=True,
        description="Extend the time axis outward to whole days",
    )

    rescale_on_cutoff: bool = Field(
        default=True,
        description="Narrow the time axis to the commits left by the time cutoff",
    )

    log_level: str = "WARNING"

    layout: PlotLayout = Field(default_factory=PlotLayout)

    def commit_url(self, commit_id: str) -> str:
        """Build the link for a commit.

        Args:
            commit_id: Commit identifier

        Returns:
            Repository base URL followed by the id
        """
        return f"{self.repository_url}{commit_id}"
