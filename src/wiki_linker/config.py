import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# The MediaWiki API refuses more than this many ids per title lookup
MAX_TITLES_PER_REQUEST = 50
MAX_WORKERS = 30


class NamespaceFilter(str, Enum):
    """Which kinds of pages a link query may return."""
    ARTICLES = "0"
    EXTENDED = "0|14|100"  # articles, categories and portals

    @classmethod
    def from_name(cls, name: str) -> "NamespaceFilter":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return cls(name.strip())


class LinkerConfig(BaseModel):
    """Configuration for a link search run."""

    domain: str = Field("en.wikipedia.org/w", description="Host and script path of the MediaWiki site")
    namespaces: NamespaceFilter = Field(NamespaceFilter.EXTENDED, description="Namespaces considered during the search")
    workers: int = Field(MAX_WORKERS, ge=1, le=MAX_WORKERS, description="Concurrent page queries per pass")
    user_agent: str = Field("wiki-linker/0.1 (https://github.com/wiki-linker)", description="User-Agent sent to the API")
    request_timeout: float = Field(30.0, gt=0, description="Per-request timeout in seconds")
    retry_min_delay: float = Field(0.5, ge=0, description="Lower bound of the jittered retry delay")
    retry_max_delay: float = Field(2.0, ge=0, description="Upper bound of the jittered retry delay")
    output_dir: str = Field(".", description="Directory for result listings")

    @field_validator("domain")
    @classmethod
    def strip_domain(cls, value: str) -> str:
        value = value.strip()
        if value.startswith("https://"):
            value = value[len("https://"):]
        value = value.rstrip("/")
        if not value:
            raise ValueError("domain must not be empty")
        return value

    @field_validator("retry_max_delay")
    @classmethod
    def check_retry_range(cls, value: float, info) -> float:
        low = info.data.get("retry_min_delay")
        if low is not None and value < low:
            raise ValueError("retry_max_delay must not be below retry_min_delay")
        return value

    @property
    def api_url(self) -> str:
        return f"https://{self.domain}/api.php"

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)

    @classmethod
    def from_env(cls, **overrides) -> "LinkerConfig":
        """Create config from environment variables (and a .env file, if present)."""
        load_dotenv()
        values = {}
        if "WIKI_LINKER_DOMAIN" in os.environ:
            values["domain"] = os.environ["WIKI_LINKER_DOMAIN"]
        if "WIKI_LINKER_NAMESPACES" in os.environ:
            values["namespaces"] = NamespaceFilter.from_name(os.environ["WIKI_LINKER_NAMESPACES"])
        if "WIKI_LINKER_WORKERS" in os.environ:
            values["workers"] = int(os.environ["WIKI_LINKER_WORKERS"])
        if "WIKI_LINKER_USER_AGENT" in os.environ:
            values["user_agent"] = os.environ["WIKI_LINKER_USER_AGENT"]
        if "WIKI_LINKER_TIMEOUT" in os.environ:
            values["request_timeout"] = float(os.environ["WIKI_LINKER_TIMEOUT"])
        if "WIKI_LINKER_OUTPUT_DIR" in os.environ:
            values["output_dir"] = os.environ["WIKI_LINKER_OUTPUT_DIR"]
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
