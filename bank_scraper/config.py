# === FILE: bank_scraper/config.py ===
"""
Loading and validation of the BankScraper configuration.
The schema is described with Pydantic; files may be YAML or JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_REMOVE_SELECTORS: List[str] = [
    "nav",
    "header",
    "footer",
    ".cookie-banner",
    ".cookie-notice",
    ".navigation",
    ".breadcrumb",
    ".social-media",
    ".advertisement",
    '[class*="cookie"]',
    '[id*="cookie"]',
]

DEFAULT_CONTENT_SELECTORS: List[str] = [
    "main",
    '[role="main"]',
    ".main-content",
    ".content",
    ".page-content",
    "article",
    ".article-content",
]


class ScraperConfig(BaseModel):
    """Configuration of a single crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    target_domain: str = Field("standardbank.co.mz", min_length=1, description="Hostname substring that keeps a URL in scope.")
    base_url: HttpUrl = Field("https://www.standardbank.co.mz", description="Seed URL of the crawl.")
    max_concurrent_pages: int = Field(5, ge=1, description="Batch width: fetches in flight at once.")
    max_pages: int = Field(1000, ge=1, description="Stop once this many records were produced.")
    request_delay_ms: int = Field(1000, ge=0, description="Pause between batches (ms).")
    navigation_timeout_ms: int = Field(30000, gt=0, description="Page navigation timeout (ms).")
    download_timeout_ms: int = Field(30000, gt=0, description="PDF download timeout (ms).")
    chunk_size: int = Field(500, ge=1, description="Maximum words per chunk.")
    min_content_length: int = Field(50, ge=0, description="Minimum characters for a document or chunk.")
    output_file: Path = Field(Path("standardbank_dataset.json"), description="Dataset JSON path.")
    pdfs_dir: Path = Field(Path("downloaded_pdfs"), description="Where downloaded PDFs are stored.")
    remove_selectors: List[str] = Field(default_factory=lambda: list(DEFAULT_REMOVE_SELECTORS))
    content_selectors: List[str] = Field(default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS))
    pdf_extensions: List[str] = Field(default_factory=lambda: [".pdf"], min_length=1)
    english_path_markers: List[str] = Field(default_factory=lambda: ["/en/", "/english/"])
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    headless: bool = Field(True, description="Run Chromium headless.")
    follow_external_pdfs: bool = Field(False, description="Queue PDF links hosted outside the target domain.")

    @field_validator("target_domain", mode="before")
    def _normalize_domain(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("pdf_extensions")
    def _lower_extensions(cls, v: List[str]) -> List[str]:
        return [ext.lower() for ext in v]

    @property
    def seed_url(self) -> str:
        return str(self.base_url)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ScraperConfig:
    """
    Read YAML or JSON and return a validated ScraperConfig.
    Without a path, configs/default.yaml is used when present, built-in
    defaults otherwise. A missing explicit file raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ScraperConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    try:
        return ScraperConfig(**data)
    except ValidationError:
        raise
