"""Application configuration loaded from environment."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


@dataclass
class Config:
    """Runtime configuration for the DOI labeler."""

    # Sent to Crossref (polite pool) and to the classifier
    crossref_email: str = field(default_factory=lambda: os.environ.get("CROSSREF_EMAIL", ""))
    classifier_api_key: str = field(default_factory=lambda: os.environ.get("KGX3_API_KEY", ""))
    classifier_api_url: str = field(default_factory=lambda: os.environ.get("KGX3_API_URL", ""))
    cache_file: str = field(
        default_factory=lambda: os.environ.get("CACHE_FILE", os.path.join("cache", "doi-cache.json"))
    )
    credit_limit: int = field(default_factory=lambda: _int_env("CREDIT_LIMIT", 100))
    # Empty disables the Crossref HTTP response cache
    http_cache_dir: str = field(default_factory=lambda: os.environ.get("HTTP_CACHE_DIR", ""))
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: os.environ.get("LOG_FORMAT", "text"))

    def __post_init__(self) -> None:
        self.credit_limit = max(0, int(self.credit_limit))

    @property
    def json_logs(self) -> bool:
        """True when LOG_FORMAT asks for one JSON object per log line."""
        return self.log_format.lower() == "json"
