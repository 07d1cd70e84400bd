"""Configuration loader for deck.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.model import OrdinalMode


@dataclass
class CollectionConfig:
    """Collection location."""
    root: Path
    db: Path


@dataclass
class MediaConfig:
    """Media folder configuration."""
    dir: Path


@dataclass
class TemplatesConfig:
    """How template change ordinals are resolved."""
    ordinals: OrdinalMode = OrdinalMode.LIVE


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"


@dataclass
class DeckConfig:
    """Complete deckhand configuration."""
    collection: CollectionConfig
    media: MediaConfig
    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None, collection_path: Path | None = None) -> DeckConfig:
    """
    Load configuration from deck.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/deck.toml
    3. collection_path/deck.toml

    Args:
        config_path: Explicit path to config file
        collection_path: Collection root for fallback search

    Returns:
        DeckConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / "deck.toml")
    if collection_path:
        search_paths.append(collection_path / "deck.toml")

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    # Parse collection config
    col_data = toml_data.get("collection", {})
    col_root = Path(col_data.get("root", collection_path or Path("./collection")))
    col_db = Path(col_data.get("db", col_root / "collection.sqlite"))

    # Parse media config
    media_data = toml_data.get("media", {})
    media_dir = Path(media_data.get("dir", col_root / "media"))

    # Parse templates config; an unknown mode is a config error
    tmpl_data = toml_data.get("templates", {})
    ordinals = OrdinalMode(tmpl_data.get("ordinals", OrdinalMode.LIVE.value))

    # Parse logging config
    log_data = toml_data.get("logging", {})
    level = str(log_data.get("level", "WARNING")).upper()

    return DeckConfig(
        collection=CollectionConfig(root=col_root, db=col_db),
        media=MediaConfig(dir=media_dir),
        templates=TemplatesConfig(ordinals=ordinals),
        logging=LoggingConfig(level=level),
    )
