"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console

from .models import ConfigModel, SourceConfig

console = Console()

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "newsdesk"


def _env(name: Optional[str]) -> Optional[str]:
    """Value of an environment variable, treating unset and empty alike."""
    if not name:
        return None
    return os.environ.get(name) or None


class Config:
    """Configuration manager.

    Secrets never live in config.yaml; each section names the environment
    variable to read them from, and the get_*_config helpers resolve them.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if config_path is None:
            env_path = _env("NEWSDESK_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_DIR / "config.yaml"
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        """sources.yaml beside config.yaml."""
        return self.config_path.parent / "sources.yaml"

    def get_sources(self) -> List[SourceConfig]:
        return load_sources(self.sources_path)

    def get_db_config(self) -> Dict[str, Any]:
        db_config = self.config.postgres.model_dump()
        db_config["password"] = db_config.get("password") or _env(db_config.get("password_env"))
        return db_config

    def get_llm_config(self) -> Dict[str, Any]:
        """LLM settings; an inline api_key takes precedence over api_key_env."""
        llm_config = self.config.llm.model_dump()
        llm_config["api_key"] = llm_config.get("api_key") or _env(llm_config.get("api_key_env"))
        return llm_config

    def get_object_storage_config(self) -> Dict[str, Any]:
        storage_config = self.config.object_storage.model_dump()
        storage_config["access_key_id"] = _env(storage_config["access_key_env"])
        storage_config["secret_access_key"] = _env(storage_config["secret_key_env"])
        return storage_config

    def get_stock_keys(self) -> Dict[str, Optional[str]]:
        stock = self.config.stock
        return {
            "unsplash": _env(stock.unsplash_key_env),
            "pexels": _env(stock.pexels_key_env),
        }


def _read_yaml(path: Path, label: str) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"{label.capitalize()} file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {label} file: {e}")


def _write_yaml(data: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file.

    An empty file yields the defaults. Raises FileNotFoundError or ValueError.
    """
    data = _read_yaml(config_path, "config") or {}
    try:
        return ConfigModel(**data)
    except (TypeError, ValidationError) as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load sources from YAML file.

    Invalid entries and repeated names are reported and skipped; the first
    entry with a given name wins.
    """
    data = _read_yaml(sources_path, "sources") or {}
    entries = data.get("sources") if isinstance(data, dict) else None
    if not entries:
        return []
    if not isinstance(entries, list):
        raise ValueError(f"'sources' must be a list in {sources_path}")

    sources: List[SourceConfig] = []
    seen = set()
    for entry in entries:
        name = entry.get("name", "unknown") if isinstance(entry, dict) else str(entry)
        try:
            source = SourceConfig.model_validate(entry)
        except ValidationError as e:
            console.print(f"[yellow]Skipping invalid source {name}: {e.error_count()} error(s)[/yellow]")
            continue
        if source.name in seen:
            console.print(f"[yellow]Skipping duplicate source name: {source.name}[/yellow]")
            continue
        seen.add(source.name)
        sources.append(source)
    return sources


def select_sources(sources: List[SourceConfig], name: Optional[str] = None) -> List[SourceConfig]:
    """Enabled sources, optionally narrowed by a case-insensitive name fragment."""
    needle = (name or "").lower()
    return [s for s in sources if s.enabled and needle in s.name.lower()]


def save_config(config: ConfigModel, config_path: Path) -> None:
    _write_yaml(config.model_dump(), config_path)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    _write_yaml({"sources": [s.model_dump() for s in sources]}, sources_path)
