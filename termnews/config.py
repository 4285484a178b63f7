"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FeedGroupConfig: One named group of feed URLs (the `feeds` list)
- FetchConfig: HTTP fetching settings
- ExtractConfig: Reader-mode scoring constants
- DedupConfig: Deduplication settings
- OutputConfig: Where saved links and articles go
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
import os
from pathlib import Path
from typing import Any

import yaml

from .core.errors import ConfigError
from .core.types import FeedGroup
from .fetch.fetcher import DEFAULT_USER_AGENT
from .reader.extractor import ScoringWeights


CONFIG_ENV_VAR = "TERMNEWS_CONFIG"
CONFIG_FILENAME = "config.yaml"


@dataclass
class FeedGroupConfig:
    """A named group of feeds shown together.

    Attributes:
        name: Group name, used to select the group on the command line
        urls: Feed URLs; earlier URLs win when two feeds carry the same story
    """

    name: str
    urls: list[str] = field(default_factory=list)

    def to_group(self) -> FeedGroup:
        return FeedGroup(name=self.name, source_urls=tuple(self.urls))


def _default_feeds() -> list[FeedGroupConfig]:
    return [
        FeedGroupConfig(
            name="Tech Hub",
            urls=[
                "https://techcrunch.com/feed/",
                "https://www.theverge.com/rss/index.xml",
                "https://wired.com/feed/rss",
            ],
        ),
        FeedGroupConfig(
            name="World",
            urls=[
                "http://feeds.bbci.co.uk/news/world/rss.xml",
                "https://www.aljazeera.com/xml/rss/all.xml",
            ],
        ),
        FeedGroupConfig(name="Sports", urls=["https://www.espn.com/espn/rss/news"]),
        FeedGroupConfig(name="Rust", urls=["https://blog.rust-lang.org/feed.xml"]),
    ]


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        timeout_seconds: Per-request timeout; a timed out source counts as failed
        retries: Number of retry attempts for transport failures
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
        max_items_per_source: Entries taken from each feed (None for all)
    """

    timeout_seconds: float = 5.0
    retries: int = 0
    trust_env: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    max_items_per_source: int | None = 15


@dataclass
class ExtractConfig:
    """Configuration for reader-mode extraction.

    The scoring fields mirror ScoringWeights; see termnews.reader.extractor.

    Attributes:
        raw_fallback: Show the page's plain text when no content block is found
    """

    tag_bonus: float = 25.0
    bonus_min_length: int = 25
    link_penalty: float = 30.0
    propagation: float = 0.6
    min_text_length: int = 25
    min_score: float = 0.0
    fragment_max_link_density: float = 0.8
    fragment_max_length: int = 20
    raw_fallback: bool = True

    def to_weights(self) -> ScoringWeights:
        names = {f.name for f in fields(ScoringWeights)}
        return ScoringWeights(**{k: v for k, v in asdict(self).items() if k in names})


@dataclass
class DedupConfig:
    """Configuration for item deduplication.

    Attributes:
        title_similarity_threshold: Fuzzy match threshold (0-100) for near-identical
            titles; None keeps link/title key matching only
    """

    title_similarity_threshold: int | None = None


@dataclass
class OutputConfig:
    """Configuration for saving.

    Attributes:
        saved_file: Markdown file that saved links are appended to
        articles_dir: Directory for saved article texts
    """

    saved_file: str = "saved_news.md"
    articles_dir: str = "articles"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "termnews.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    feeds: list[FeedGroupConfig] = field(default_factory=_default_feeds)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def groups(self) -> list[FeedGroup]:
        return [feed.to_group() for feed in self.feeds]

    def find_group(self, selector: str) -> FeedGroup | None:
        """Look up a group by 1-based index or case-insensitive name."""
        groups = self.groups()
        if selector.isdigit():
            index = int(selector) - 1
            return groups[index] if 0 <= index < len(groups) else None
        for group in groups:
            if group.name.casefold() == selector.casefold():
                return group
        return None


def user_config_path() -> Path:
    """Per-user config location (~/.config/termnews/config.yaml, honoring XDG_CONFIG_HOME)."""
    base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "termnews" / CONFIG_FILENAME


def find_config_path(path: str | None = None) -> Path | None:
    """Resolve which config file to load.

    Order: explicit path, $TERMNEWS_CONFIG, ./config.yaml, the user config file.
    An explicit path (or env var) is returned even if it does not exist so
    load_config can report it.
    """
    if path:
        return Path(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    for candidate in (Path(CONFIG_FILENAME), user_config_path()):
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | None = None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    Raises:
        ConfigError: If the file is missing, not valid YAML, or has invalid fields
    """
    config_path = find_config_path(path)
    if config_path is None:
        return AppConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Sections are merged key by key; the feeds list replaces the defaults.
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    try:
        return _fromdict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    feeds = data["feeds"] or []
    if not isinstance(feeds, list):
        raise ValueError("'feeds' must be a list of {name, urls} mappings")
    return AppConfig(
        feeds=[FeedGroupConfig(name=str(f["name"]), urls=list(f.get("urls") or [])) for f in feeds],
        fetch=FetchConfig(**data["fetch"]),
        extract=ExtractConfig(**data["extract"]),
        dedup=DedupConfig(**data["dedup"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
    )


def config_template() -> str:
    """Starter config written for new users."""
    return """\
feeds:
  - name: Tech Hub
    urls:
      - https://techcrunch.com/feed/
      - https://www.theverge.com/rss/index.xml
  - name: Crypto
    urls:
      - https://cointelegraph.com/rss

fetch:
  timeout_seconds: 5.0
  max_items_per_source: 15

dedup:
  # Set to e.g. 92 to also merge near-identical headlines
  title_similarity_threshold: null

output:
  saved_file: saved_news.md
"""
