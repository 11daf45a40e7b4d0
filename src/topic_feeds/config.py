"""Configuration management."""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from topic_feeds.adapters.sources.rss_fetcher import DEFAULT_USER_AGENT
from topic_feeds.core import FeedConfig, TopicConfig


class ConfigError(ValueError):
    """Raised when settings or topic configuration are missing or malformed."""


@dataclass
class PathsConfig:
    """Path settings."""
    feeds_file: Path = Path("feeds.json")
    output_file: Path = Path("data.json")


@dataclass
class FetchConfig:
    """Feed fetching settings."""
    timeout: float = 20.0
    max_concurrency: int = 8
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class PipelineConfig:
    """Aggregation settings."""
    keep_hours: float = 48
    untitled_placeholder: str = "(sem título)"


@dataclass
class Settings:
    """Application settings."""
    
    paths: PathsConfig = field(default_factory=PathsConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    
    @property
    def feeds_file(self) -> Path:
        return self.paths.feeds_file
    
    @property
    def output_file(self) -> Path:
        return self.paths.output_file
    
    @property
    def keep_hours(self) -> float:
        return self.pipeline.keep_hours


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}
    
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    
    if not isinstance(config, dict):
        raise ConfigError(f"{config_path}: expected a mapping at the top level")
    return config


def _coerce(value: Any, expected: type, setting: str) -> Any:
    """Check a YAML value against the field type; ints are accepted for floats."""
    if expected is Path and isinstance(value, (str, Path)) and value:
        return Path(value)
    if isinstance(value, bool):
        raise ConfigError(f"Setting '{setting}' must be {expected.__name__}, got bool")
    if expected is float and isinstance(value, (int, float)):
        return float(value)
    if expected in (int, str) and isinstance(value, expected):
        return value
    raise ConfigError(
        f"Setting '{setting}' must be {expected.__name__}, got {type(value).__name__}"
    )


def _apply_section(section: Any, values: Any, name: str) -> None:
    if not isinstance(values, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    field_types = {f.name: f.type for f in fields(section)}
    for key, value in values.items():
        if key not in field_types:
            raise ConfigError(f"Unknown setting '{name}.{key}'")
        setattr(section, key, _coerce(value, field_types[key], f"{name}.{key}"))


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)
    settings = Settings()
    
    if "paths" in config:
        _apply_section(settings.paths, config["paths"], "paths")
    
    if "fetch" in config:
        _apply_section(settings.fetch, config["fetch"], "fetch")
    
    if "pipeline" in config:
        _apply_section(settings.pipeline, config["pipeline"], "pipeline")
    
    # Environment overrides
    feeds_file = os.getenv("TOPIC_FEEDS_FEEDS_FILE")
    if feeds_file:
        settings.paths.feeds_file = Path(feeds_file)
    
    output_file = os.getenv("TOPIC_FEEDS_OUTPUT_FILE")
    if output_file:
        settings.paths.output_file = Path(output_file)
    
    if settings.fetch.max_concurrency < 1:
        raise ConfigError("fetch.max_concurrency must be at least 1")
    if settings.fetch.timeout <= 0:
        raise ConfigError("fetch.timeout must be positive")
    if settings.pipeline.keep_hours <= 0:
        raise ConfigError("pipeline.keep_hours must be positive")
    
    return settings


def parse_topics(data: Any) -> list[TopicConfig]:
    """Validate a topic mapping and build TopicConfig objects.
    
    Expected shape::
    
        {"<topic>": {"feeds": [{"name": ..., "url": ...}], "keywords": [...]}}
    
    `feeds` is required, `keywords` is optional (empty means no filter).
    """
    if not isinstance(data, dict):
        raise ConfigError("Topic configuration must be a mapping of topic key to definition")
    
    topics: list[TopicConfig] = []
    
    for key, definition in data.items():
        if not isinstance(definition, dict):
            raise ConfigError(f"Topic '{key}': definition must be a mapping")
        
        raw_feeds = definition.get("feeds")
        if not isinstance(raw_feeds, list):
            raise ConfigError(f"Topic '{key}': 'feeds' is required and must be a list")
        
        feeds = []
        for index, raw_feed in enumerate(raw_feeds):
            if not isinstance(raw_feed, dict):
                raise ConfigError(f"Topic '{key}': feed #{index} must be a mapping with name and url")
            name = raw_feed.get("name")
            url = raw_feed.get("url")
            if not isinstance(name, str) or not name.strip():
                raise ConfigError(f"Topic '{key}': feed #{index} is missing 'name'")
            if not isinstance(url, str) or not url.strip():
                raise ConfigError(f"Topic '{key}': feed '{name}' is missing 'url'")
            feeds.append(FeedConfig(name=name, url=url.strip()))
        
        raw_keywords = definition.get("keywords")
        if raw_keywords is None:
            raw_keywords = []
        if not isinstance(raw_keywords, list) or not all(isinstance(k, str) for k in raw_keywords):
            raise ConfigError(f"Topic '{key}': 'keywords' must be a list of strings")
        
        topics.append(
            TopicConfig(
                key=str(key),
                feeds=tuple(feeds),
                keywords=tuple(k for k in raw_keywords if k),
            )
        )
    
    return topics


def load_topics(feeds_path: Path) -> list[TopicConfig]:
    """Load and validate topic definitions from a JSON (.json) or YAML file."""
    if not feeds_path.exists():
        raise ConfigError(f"Topic configuration not found: {feeds_path}")
    
    try:
        with open(feeds_path, "r", encoding="utf-8") as f:
            if feeds_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"{feeds_path}: could not parse topic configuration: {e}") from e
    
    return parse_topics(data)
